"""
Event lifecycle logic: create, list, join, update and delete.
"""

import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, List

from eventhub.auth_service.utils import normalize_email
from eventhub.database.stores import EventStore
from eventhub.errors import ResourceNotFound, ValidationError

logger = logging.getLogger(__name__)

# --- CONSTANTS FOR VALIDATION ---
REQUIRED_FIELDS = ["title", "name", "dateTime", "location", "description", "email"]
UPDATABLE_FIELDS = ["title", "name", "dateTime", "location", "description", "attendeeCount"]


def parse_attendee_count(value: Any) -> int:
    """
    Coerce an attendee count from client input.

    Numbers and numeric strings are truncated to an int (5.7 -> 5). Anything
    non-numeric, non-finite or negative becomes 0.
    """
    if isinstance(value, bool):
        return 0
    if isinstance(value, str):
        value = value.strip()
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return max(int(number), 0)


def is_blank(value: Any) -> bool:
    """True unless value is a non-empty string."""
    return not isinstance(value, str) or not value.strip()


def serialize_event(event: Dict[str, Any]) -> Dict[str, Any]:
    """Make a stored event JSON-safe (string id, ISO timestamps)."""
    out = dict(event)
    if "_id" in out:
        out["_id"] = str(out["_id"])
    created = out.get("createdAt")
    if isinstance(created, datetime):
        # Stored timestamps are UTC; clients without tz_aware get naive ones
        if created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        out["createdAt"] = created.isoformat()
    return out


class EventService:
    """Service for event operations. Raises errors from eventhub.errors."""

    def __init__(self, events: EventStore) -> None:
        self._events = events

    def create(self, fields: Dict[str, Any]) -> str:
        """
        Insert a new event.

        Returns:
            str: The id of the new event.

        Raises:
            ValidationError: A required field is absent, empty or not a string.
        """
        fields = dict(fields)
        if isinstance(fields.get("email"), str):
            fields["email"] = normalize_email(fields["email"])

        missing = [name for name in REQUIRED_FIELDS if is_blank(fields.get(name))]
        if missing:
            raise ValidationError(f"All fields including email are required (missing: {', '.join(missing)})")

        event = {name: fields[name] for name in REQUIRED_FIELDS}
        event["attendeeCount"] = parse_attendee_count(fields.get("attendeeCount"))
        event["createdAt"] = datetime.now(timezone.utc)

        event_id = self._events.insert(event)
        logger.info(f"Created event {event_id}")
        return str(event_id)

    def list_all(self) -> List[Dict[str, Any]]:
        return [serialize_event(e) for e in self._events.find_all()]

    def list_by_owner(self, email: str) -> List[Dict[str, Any]]:
        """Events owned by `email`, compared case-insensitively. An empty owner matches nothing."""
        email = normalize_email(email)
        if not email:
            return []
        return [serialize_event(e) for e in self._events.find_by_owner(email)]

    def get(self, event_id: str) -> Dict[str, Any]:
        event = self._events.find_by_id(event_id)
        if not event:
            raise ResourceNotFound("Event not found")
        return serialize_event(event)

    def join(self, event_id: str) -> None:
        if not self._events.increment_attendees(event_id):
            raise ResourceNotFound("Event not found")

    def update(self, event_id: str, partial: Dict[str, Any]) -> None:
        """
        Overwrite whitelisted fields of an event.

        Keys outside UPDATABLE_FIELDS (ids, owner email, timestamps) are
        ignored. An update that changes nothing still succeeds.

        Raises:
            ValidationError: No updatable field given, or a text field emptied
                or set to a non-string.
            ResourceNotFound: The event does not exist.
        """
        fields = {k: v for k, v in partial.items() if k in UPDATABLE_FIELDS}
        if not fields:
            raise ValidationError("No valid fields to update")

        for name, value in fields.items():
            if name != "attendeeCount" and is_blank(value):
                raise ValidationError(f"{name} must be a non-empty string")

        if "attendeeCount" in fields:
            fields["attendeeCount"] = parse_attendee_count(fields["attendeeCount"])

        if not self._events.update_fields(event_id, fields):
            raise ResourceNotFound("Event not found")

    def delete(self, event_id: str) -> None:
        if not self._events.delete(event_id):
            raise ResourceNotFound("Event not found")
