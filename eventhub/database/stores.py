"""
Collection-backed stores for users and events.

Each store wraps a single pymongo collection. Every method that takes an id
treats a malformed id the same as an id that matches no document.
"""

from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import DESCENDING


def to_object_id(value: Any) -> Optional[ObjectId]:
    """
    Parse a document id.

    Args:
        value: A 24-character hex string or an ObjectId.

    Returns:
        ObjectId, or None if the value is not a valid id.
    """
    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


class UserStore:
    """Credential store over the `users` collection."""

    def __init__(self, collection) -> None:
        self.collection = collection

    def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return self.collection.find_one({"email": email})

    def find_by_username(self, username: str) -> Optional[Dict[str, Any]]:
        return self.collection.find_one({"username": username})

    def find_by_id(self, user_id: Any) -> Optional[Dict[str, Any]]:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return self.collection.find_one({"_id": oid})

    def insert(self, user: Dict[str, Any]) -> ObjectId:
        # May raise DuplicateKeyError once the unique email index exists
        return self.collection.insert_one(user).inserted_id


class EventStore:
    """Event store over the `events` collection."""

    def __init__(self, collection) -> None:
        self.collection = collection

    def insert(self, event: Dict[str, Any]) -> ObjectId:
        return self.collection.insert_one(event).inserted_id

    def find_all(self) -> List[Dict[str, Any]]:
        """All events, most recently created first."""
        return list(self.collection.find().sort("createdAt", DESCENDING))

    def find_by_owner(self, email: str) -> List[Dict[str, Any]]:
        return list(self.collection.find({"email": email}))

    def find_by_id(self, event_id: Any) -> Optional[Dict[str, Any]]:
        oid = to_object_id(event_id)
        if oid is None:
            return None
        return self.collection.find_one({"_id": oid})

    def increment_attendees(self, event_id: Any) -> bool:
        """
        Add one attendee in a single atomic update.

        Returns:
            bool: True if an event matched the id.
        """
        oid = to_object_id(event_id)
        if oid is None:
            return False
        result = self.collection.update_one({"_id": oid}, {"$inc": {"attendeeCount": 1}})
        return result.matched_count > 0

    def update_fields(self, event_id: Any, fields: Dict[str, Any]) -> bool:
        """
        Overwrite the given fields.

        Returns:
            bool: True if an event matched the id, even when nothing changed.
        """
        oid = to_object_id(event_id)
        if oid is None:
            return False
        result = self.collection.update_one({"_id": oid}, {"$set": fields})
        return result.matched_count > 0

    def delete(self, event_id: Any) -> bool:
        oid = to_object_id(event_id)
        if oid is None:
            return False
        result = self.collection.delete_one({"_id": oid})
        return result.deleted_count > 0
