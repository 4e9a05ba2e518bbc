import pytest
from datetime import datetime, timezone
from types import SimpleNamespace

from argon2 import PasswordHasher

from backend.auth_service.models import User
from backend.auth_service.utils import create_token
from backend.config import Settings
from backend.database.queries import USER_COLUMNS, RecordNotFound
from backend.events_service.models import EVENT_COLUMNS, Event
from backend.gateway.server import create_app

TEST_SECRET = "test_secret"
TEST_ORIGIN = "http://localhost:5173"


class InMemoryTable:
    """
    Stand-in for queries.Table that keeps rows in a dict.
    Same method names, same RecordNotFound signal.
    """

    def __init__(self, record_type, columns):
        self.record_type = record_type
        self.columns = columns
        self.rows = {}
        self.next_id = 1

    def find_many(self, order_by=None, descending=False):
        rows = list(self.rows.values())
        if order_by:
            rows.sort(key=lambda r: r[order_by], reverse=descending)
        return [self.record_type(**r) for r in rows]

    def find_unique(self, **where):
        ((column, value),) = where.items()
        for row in self.rows.values():
            if row[column] == value:
                return self.record_type(**row)
        return None

    def create(self, data):
        now = datetime.now(timezone.utc)
        row = {c: None for c in self.columns}
        row.update(created_at=now, updated_at=now)
        row.update(data)
        row["id"] = self.next_id
        self.next_id += 1
        self.rows[row["id"]] = row
        return self.record_type(**row)

    def update(self, key, data):
        if key not in self.rows:
            raise RecordNotFound(key)
        self.rows[key].update(data)
        return self.record_type(**self.rows[key])

    def delete(self, key):
        if key not in self.rows:
            raise RecordNotFound(key)
        return self.record_type(**self.rows.pop(key))


@pytest.fixture
def settings():
    return Settings(jwt_secret=TEST_SECRET, allowed_origin=TEST_ORIGIN)


@pytest.fixture
def database():
    return SimpleNamespace(
        events=InMemoryTable(Event, EVENT_COLUMNS),
        users=InMemoryTable(User, USER_COLUMNS),
    )


@pytest.fixture
def app(settings, database):
    app = create_app(settings, database)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def user(database):
    """A stored user whose password is 'password123'."""
    return database.users.create({
        "username": "alice",
        "password": PasswordHasher().hash("password123"),
    })


@pytest.fixture
def auth_headers(user):
    token = create_token(user.id, TEST_SECRET)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def mock_db(mocker):
    """
    Mocks a psycopg2 connection and cursor, plus a connect() returning them.
    """
    mock_conn = mocker.MagicMock()
    mock_cursor = mocker.MagicMock()

    # Setup the context manager for connection
    mock_conn.__enter__.return_value = mock_conn
    mock_conn.__exit__.return_value = None

    # Setup the context manager for cursor
    mock_cursor.__enter__.return_value = mock_cursor
    mock_cursor.__exit__.return_value = None

    mock_conn.cursor.return_value = mock_cursor
    connect = mocker.Mock(return_value=mock_conn)

    return connect, mock_conn, mock_cursor
