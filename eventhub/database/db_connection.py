"""
MongoDB connection helper.
Provides MongoStore, the store context shared by all services, and
get_store() for use inside request handlers.
"""

import logging
from typing import Optional

from flask import current_app
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.errors import PyMongoError

from eventhub.database.stores import EventStore, UserStore
from eventhub.errors import StoreUnavailable

logger = logging.getLogger(__name__)

EXTENSION_KEY = "eventhub.store"


class MongoStore:
    """
    Holds the MongoDB client and the collection-backed stores.

    The context starts out not ready. connect() binds the collections; until
    it succeeds, asking for a store raises StoreUnavailable (HTTP 503).

    Usage:
        store = MongoStore(uri, "eventDB")
        store.connect()
        store.user_store.find_by_email("a@b.com")
    """

    def __init__(self, uri: str, db_name: str, server_timeout_ms: int = 5000) -> None:
        self.uri = uri
        self.db_name = db_name
        self.server_timeout_ms = server_timeout_ms
        self.client: Optional[MongoClient] = None
        self._users: Optional[UserStore] = None
        self._events: Optional[EventStore] = None

    @property
    def is_ready(self) -> bool:
        return self._users is not None and self._events is not None

    def bind(self, users_collection, events_collection) -> None:
        """Attach already-open collections (used by connect() and by tests)."""
        self._users = UserStore(users_collection)
        self._events = EventStore(events_collection)

    def connect(self) -> bool:
        """
        Open the client, ping the server and bind the collections.

        Returns:
            bool: True when the store is ready. Failures are logged and leave
            the context in the not-ready state.
        """
        try:
            client = MongoClient(self.uri, serverSelectionTimeoutMS=self.server_timeout_ms, tz_aware=True)
            client.admin.command("ping")
        except PyMongoError as e:
            logger.error(f"MongoDB connection error: {e}")
            return False

        db = client[self.db_name]
        self.client = client
        self.bind(db["users"], db["events"])
        self.ensure_indexes()
        logger.info(f"Connected to MongoDB database '{self.db_name}'")
        return True

    def ensure_indexes(self) -> None:
        """
        Create the unique email index on users and the createdAt index on events.

        The unique index is what makes concurrent signups with the same email
        safe; the pre-insert lookup alone is not atomic.
        """
        try:
            self._users.collection.create_index([("email", ASCENDING)], unique=True)
            self._events.collection.create_index([("createdAt", DESCENDING)])
        except PyMongoError as e:
            # Existing duplicate emails make the unique index fail to build
            logger.warning(f"Could not create indexes: {e}")

    @property
    def user_store(self) -> UserStore:
        if self._users is None:
            raise StoreUnavailable()
        return self._users

    @property
    def event_store(self) -> EventStore:
        if self._events is None:
            raise StoreUnavailable()
        return self._events

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
        self.client = None
        self._users = None
        self._events = None


def init_store(app, store: Optional[MongoStore] = None) -> MongoStore:
    """
    Attach a store context to the app, connecting a new one if none is given.
    """
    if store is None:
        store = MongoStore(app.config["MONGO_URI"], app.config["MONGO_DB_NAME"])
        store.connect()
    app.extensions[EXTENSION_KEY] = store
    return store


def get_store() -> MongoStore:
    """
    Return the store context of the current app.

    Raises:
        StoreUnavailable: If no store was ever attached to the app.
    """
    store = current_app.extensions.get(EXTENSION_KEY)
    if store is None:
        raise StoreUnavailable()
    return store
