"""
Generic query interface over PostgreSQL tables.

Each Table exposes find_many, find_unique, create, update and delete and
returns typed records. Handlers only ever talk to this layer.
"""

from functools import partial
from typing import Any, Callable, Dict, Iterable, List, Optional, Type

from psycopg2 import sql

from backend.auth_service.models import User
from backend.database.db_connection import get_db
from backend.events_service.models import EVENT_COLUMNS, Event

USER_COLUMNS = ("id", "username", "password", "created_at", "updated_at")


class RecordNotFound(LookupError):
    """Raised by update/delete when no row matches the key."""


class Table:
    def __init__(
        self,
        name: str,
        columns: Iterable[str],
        record_type: Type,
        connect: Callable,
        primary_key: str = "id",
    ):
        self.name = name
        self.columns = tuple(columns)
        self.record_type = record_type
        self.connect = connect
        self.primary_key = primary_key

    def _check_columns(self, names: Iterable[str]) -> None:
        unknown = [n for n in names if n not in self.columns]
        if unknown:
            raise ValueError(f"Unknown column(s) for {self.name}: {', '.join(unknown)}")

    def _record(self, row: Optional[Dict[str, Any]]):
        return self.record_type(**row) if row else None

    def find_many(self, order_by: Optional[str] = None, descending: bool = False) -> List[Any]:
        query = sql.SQL("SELECT * FROM {}").format(sql.Identifier(self.name))
        if order_by:
            self._check_columns([order_by])
            query += sql.SQL(" ORDER BY {} {}").format(
                sql.Identifier(order_by), sql.SQL("DESC" if descending else "ASC")
            )

        with self.connect() as conn:
            with conn.cursor() as cur:
                cur.execute(query)
                return [self._record(row) for row in cur.fetchall()]

    def find_unique(self, **where: Any):
        """
        Fetch the single row matching a unique column, or None.

        Example:
            users.find_unique(username="alice")
        """
        if len(where) != 1:
            raise ValueError("find_unique expects exactly one column")
        ((column, value),) = where.items()
        self._check_columns([column])

        query = sql.SQL("SELECT * FROM {} WHERE {} = %s").format(
            sql.Identifier(self.name), sql.Identifier(column)
        )
        with self.connect() as conn:
            with conn.cursor() as cur:
                cur.execute(query, (value,))
                return self._record(cur.fetchone())

    def create(self, data: Dict[str, Any]):
        self._check_columns(data)
        names = list(data)
        query = sql.SQL("INSERT INTO {} ({}) VALUES ({}) RETURNING *").format(
            sql.Identifier(self.name),
            sql.SQL(", ").join(map(sql.Identifier, names)),
            sql.SQL(", ").join(sql.Placeholder() * len(names)),
        )
        with self.connect() as conn:
            with conn.cursor() as cur:
                cur.execute(query, [data[n] for n in names])
                return self._record(cur.fetchone())

    def update(self, key: Any, data: Dict[str, Any]):
        """
        Apply the given columns to the row with this primary key.

        Raises:
            RecordNotFound: No row has that key. Nothing is written.
        """
        if not data:
            raise ValueError("update needs at least one column")
        self._check_columns(data)
        names = list(data)
        query = sql.SQL("UPDATE {} SET {} WHERE {} = %s RETURNING *").format(
            sql.Identifier(self.name),
            sql.SQL(", ").join(
                sql.SQL("{} = %s").format(sql.Identifier(n)) for n in names
            ),
            sql.Identifier(self.primary_key),
        )
        with self.connect() as conn:
            with conn.cursor() as cur:
                cur.execute(query, [data[n] for n in names] + [key])
                row = cur.fetchone()
        if row is None:
            raise RecordNotFound(f"{self.name} {key} not found")
        return self._record(row)

    def delete(self, key: Any):
        query = sql.SQL("DELETE FROM {} WHERE {} = %s RETURNING *").format(
            sql.Identifier(self.name), sql.Identifier(self.primary_key)
        )
        with self.connect() as conn:
            with conn.cursor() as cur:
                cur.execute(query, (key,))
                row = cur.fetchone()
        if row is None:
            raise RecordNotFound(f"{self.name} {key} not found")
        return self._record(row)


class Database:
    """The tables this backend uses, bound to one connection URL."""

    def __init__(self, database_url: Optional[str]):
        connect = partial(get_db, database_url)
        self.events = Table("events", EVENT_COLUMNS, Event, connect)
        self.users = Table("users", USER_COLUMNS, User, connect)
