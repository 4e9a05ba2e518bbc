"""
Event record and its wire format.

Columns are snake_case in the database; the JSON API uses camelCase.
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

# wire field -> column, for the fields clients may write
EVENT_FIELDS = {
    "title": "title",
    "date": "date",
    "description": "description",
    "venue": "venue",
    "location": "location",
    "imageUrl": "image_url",
    "ticketUrl": "ticket_url",
}

EVENT_COLUMNS = ("id", *EVENT_FIELDS.values(), "created_at", "updated_at")


def parse_dt(val: Any) -> datetime:
    """
    Parse an ISO-8601 date or datetime string.

    Accepts 'YYYY-MM-DD', 'YYYY-MM-DDTHH:MM[:SS]' and a trailing 'Z' or offset.
    Values without an offset are taken as UTC.

    Raises:
        ValueError: If the value is not a parseable string.
    """
    if not isinstance(val, str) or not val:
        raise ValueError(f"Invalid date: {val!r}")
    if val.endswith("Z"):
        val = val[:-1] + "+00:00"
    parsed = datetime.fromisoformat(val)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _iso(value: Any) -> Optional[str]:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


@dataclass
class Event:
    id: int
    title: Optional[str] = None
    date: Optional[datetime] = None
    description: Optional[str] = None
    venue: Optional[str] = None
    location: Optional[str] = None
    image_url: Optional[str] = None
    ticket_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_json(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "date": _iso(self.date),
            "description": self.description,
            "venue": self.venue,
            "location": self.location,
            "imageUrl": self.image_url,
            "ticketUrl": self.ticket_url,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }
