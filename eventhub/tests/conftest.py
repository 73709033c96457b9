import os

import pytest
from bson import ObjectId
from unittest.mock import MagicMock

# Ensure JWT_SECRET is set for tests
os.environ["JWT_SECRET"] = "test_secret"

from eventhub.database.db_connection import MongoStore
from eventhub.gateway.server import create_app

TEST_SECRET = "test_secret"


@pytest.fixture
def users():
    """
    Mock `users` collection. find_one finds nothing unless a test says so.
    """
    collection = MagicMock()
    collection.find_one.return_value = None
    collection.insert_one.return_value.inserted_id = ObjectId()
    return collection


@pytest.fixture
def events():
    """
    Mock `events` collection. Updates and deletes match one document by default.
    """
    collection = MagicMock()
    collection.find_one.return_value = None
    collection.insert_one.return_value.inserted_id = ObjectId()
    collection.update_one.return_value.matched_count = 1
    collection.update_one.return_value.modified_count = 1
    collection.delete_one.return_value.deleted_count = 1
    return collection


@pytest.fixture
def store(users, events):
    store = MongoStore("mongodb://unused:27017", "eventDB_test")
    store.bind(users, events)
    return store


@pytest.fixture
def config():
    return {"TESTING": True, "JWT_SECRET": TEST_SECRET, "REQUIRE_AUTH_FOR_WRITES": True}


@pytest.fixture
def app(config, store):
    return create_app(config, store=store)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def user_doc():
    return {
        "_id": ObjectId(),
        "username": "alice",
        "email": "alice@example.com",
        "photoUrl": "https://example.com/alice.png",
        "password": "$argon2id$not-a-real-hash",
    }


@pytest.fixture
def auth_header(app, users, user_doc):
    """
    Authorization header for `user_doc`, whose lookup by id succeeds.
    """
    from eventhub.auth_service.utils import create_token

    users.find_one.return_value = user_doc
    with app.app_context():
        token = create_token(user_doc["_id"], user_doc["email"])
    return {"Authorization": f"Bearer {token}"}
