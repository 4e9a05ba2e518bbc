import pytest
from datetime import datetime, timezone

from backend.auth_service.models import User
from backend.database.db_connection import get_db
from backend.database.queries import USER_COLUMNS, Database, RecordNotFound, Table
from backend.events_service.models import EVENT_COLUMNS, Event

ROW = {
    "id": 1,
    "title": "Test Event",
    "date": datetime(2025, 1, 1, tzinfo=timezone.utc),
    "description": "Desc",
    "venue": "Hall",
    "location": "Town",
    "image_url": None,
    "ticket_url": None,
    "created_at": datetime(2024, 12, 1, tzinfo=timezone.utc),
    "updated_at": datetime(2024, 12, 1, tzinfo=timezone.utc),
}


@pytest.fixture
def events(mock_db):
    connect, _, _ = mock_db
    return Table("events", EVENT_COLUMNS, Event, connect)


def test_find_many_returns_records(events, mock_db):
    _, _, mock_cursor = mock_db
    mock_cursor.fetchall.return_value = [ROW]

    result = events.find_many(order_by="date")

    assert result == [Event(**ROW)]
    assert mock_cursor.execute.called


def test_find_many_rejects_unknown_order_column(events, mock_db):
    connect, _, _ = mock_db
    with pytest.raises(ValueError):
        events.find_many(order_by="date; DROP TABLE events")
    connect.assert_not_called()


def test_find_unique(events, mock_db):
    _, _, mock_cursor = mock_db
    mock_cursor.fetchone.return_value = ROW

    event = events.find_unique(id=1)

    assert event.title == "Test Event"
    args, _ = mock_cursor.execute.call_args
    assert args[1] == (1,)


def test_find_unique_missing(events, mock_db):
    _, _, mock_cursor = mock_db
    mock_cursor.fetchone.return_value = None
    assert events.find_unique(id=99) is None


def test_find_unique_needs_one_column(events):
    with pytest.raises(ValueError):
        events.find_unique(id=1, title="x")


def test_create(events, mock_db):
    _, _, mock_cursor = mock_db
    mock_cursor.fetchone.return_value = ROW

    event = events.create({"title": "Test Event", "date": ROW["date"]})

    assert event.id == 1
    args, _ = mock_cursor.execute.call_args
    assert args[1] == ["Test Event", ROW["date"]]


def test_create_rejects_unknown_column(events):
    with pytest.raises(ValueError):
        events.create({"title": "x", "organizer_id": 1})


def test_update(events, mock_db):
    _, _, mock_cursor = mock_db
    mock_cursor.fetchone.return_value = {**ROW, "title": "New"}

    event = events.update(1, {"title": "New"})

    assert event.title == "New"
    args, _ = mock_cursor.execute.call_args
    assert args[1] == ["New", 1]


def test_update_missing_row_raises(events, mock_db):
    _, _, mock_cursor = mock_db
    mock_cursor.fetchone.return_value = None

    with pytest.raises(RecordNotFound):
        events.update(42, {"title": "New"})


def test_delete(events, mock_db):
    _, _, mock_cursor = mock_db
    mock_cursor.fetchone.return_value = ROW

    assert events.delete(1).id == 1


def test_delete_missing_row_raises(events, mock_db):
    _, _, mock_cursor = mock_db
    mock_cursor.fetchone.return_value = None

    with pytest.raises(RecordNotFound):
        events.delete(42)


def test_database_tables():
    database = Database("postgresql://localhost/events")
    assert database.events.record_type is Event
    assert database.users.record_type is User
    assert database.users.columns == USER_COLUMNS


def test_get_db_requires_url():
    with pytest.raises(RuntimeError):
        with get_db(None):
            pass


def test_get_db_closes_connection(mocker):
    mock_conn = mocker.MagicMock()
    mock_conn.__enter__.return_value = mock_conn
    connect = mocker.patch("backend.database.db_connection.psycopg2.connect", return_value=mock_conn)

    with get_db("postgresql://localhost/events") as conn:
        assert conn is mock_conn

    connect.assert_called_once()
    mock_conn.close.assert_called_once()


def test_get_db_closes_connection_on_error(mocker):
    mock_conn = mocker.MagicMock()
    mock_conn.__enter__.return_value = mock_conn
    mock_conn.__exit__.return_value = None
    mocker.patch("backend.database.db_connection.psycopg2.connect", return_value=mock_conn)

    with pytest.raises(ValueError):
        with get_db("postgresql://localhost/events"):
            raise ValueError("boom")

    mock_conn.close.assert_called_once()
