"""
Events service routes: list, create, read, update, and delete events.

Reads are public. Writes go through the bearer-token guard.
Field values are passed to the database as given; bad input surfaces as 500.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Tuple

from flask import Blueprint, Response, current_app, jsonify, request

from backend.auth_service.utils import token_required
from backend.database.queries import RecordNotFound
from backend.events_service.models import EVENT_FIELDS, parse_dt
from backend.shared.errors import InternalError, NotFound

logger = logging.getLogger(__name__)

events_bp = Blueprint("events", __name__)


def _events():
    return current_app.extensions["database"].events


def _event_data(data: Dict[str, Any], partial: bool) -> Dict[str, Any]:
    """
    Map wire fields to columns, parsing the date.

    On create every field is written (absent ones as NULL); on update only
    the fields present in the body are.
    """
    if not isinstance(data, dict):
        raise TypeError("Event body must be a JSON object")

    values = {}
    for field, column in EVENT_FIELDS.items():
        if partial and field not in data:
            continue
        values[column] = data.get(field)

    if partial:
        if values.get("date"):
            values["date"] = parse_dt(values["date"])
        else:
            values.pop("date", None)
    else:
        values["date"] = parse_dt(values["date"])
    return values


@events_bp.route("", methods=["GET"])
def list_events() -> Tuple[Response, int]:
    """
    Return all events, earliest date first.

    Returns:
        200: List of event objects.
        500: Database error.
    """
    try:
        events = _events().find_many(order_by="date")
    except Exception:
        logger.exception("Error while getting events")
        return InternalError("Internal server error while getting events").to_response()

    return jsonify([event.to_json() for event in events]), 200


@events_bp.route("", methods=["POST"])
@token_required
def create_event() -> Tuple[Response, int]:
    """
    Create an event.

    Accepts title, date, description, venue, location, imageUrl, ticketUrl.

    Returns:
        201: The created event.
        401: Missing or invalid token.
        500: Anything else, including unparseable input.
    """
    try:
        data = _event_data(request.get_json(silent=True) or {}, partial=False)
        event = _events().create(data)
    except Exception:
        logger.exception("Error by creating new event")
        return InternalError("Internal server error by creating event").to_response()

    return jsonify(event.to_json()), 201


@events_bp.route("/<int:event_id>", methods=["GET"])
def get_event(event_id: int) -> Tuple[Response, int]:
    """
    Get a single event by ID.

    Returns:
        200: Event object.
        404: Event not found.
        500: Database error.
    """
    try:
        event = _events().find_unique(id=event_id)
    except Exception:
        logger.exception(f"Error getting event with id {event_id}")
        return InternalError("Internal server error getting event").to_response()

    if event is None:
        return NotFound("Event not found").to_response()

    return jsonify(event.to_json()), 200


@events_bp.route("/<int:event_id>", methods=["PUT"])
@token_required
def update_event(event_id: int) -> Tuple[Response, int]:
    """
    Update an event.

    Only the fields present in the body change; updated_at is always refreshed.

    Returns:
        200: The updated event.
        401: Missing or invalid token.
        404: Event not found (nothing is written).
        500: Anything else.
    """
    try:
        data = _event_data(request.get_json(silent=True) or {}, partial=True)
        data["updated_at"] = datetime.now(timezone.utc)
        event = _events().update(event_id, data)
    except RecordNotFound:
        return NotFound("Event not found").to_response()
    except Exception:
        logger.exception(f"Error by updating event with id {event_id}")
        return InternalError("Internal server error by updating event").to_response()

    return jsonify(event.to_json()), 200


@events_bp.route("/<int:event_id>", methods=["DELETE"])
@token_required
def delete_event(event_id: int):
    """
    Delete an event.

    Returns:
        204: Deleted, empty body.
        401: Missing or invalid token.
        404: Event not found (also for a repeated delete).
        500: Database error.
    """
    try:
        _events().delete(event_id)
    except RecordNotFound:
        return NotFound("Event not found").to_response()
    except Exception:
        logger.exception(f"Error deleting event with id {event_id}")
        return InternalError("Internal server error by deleting event").to_response()

    return "", 204
