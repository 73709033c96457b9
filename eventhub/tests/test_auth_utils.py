import pytest
import jwt
from datetime import datetime, timedelta, timezone

from eventhub.auth_service.utils import create_token, decode_token, public_user, verify_token_from_request
from eventhub.errors import InvalidToken

TEST_SECRET = "test_secret"


def test_create_token(app):
    with app.app_context():
        token = create_token("650000000000000000000001", "a@example.com")

    assert isinstance(token, str)

    payload = jwt.decode(token, TEST_SECRET, algorithms=["HS256"])
    assert payload["sub"] == "650000000000000000000001"
    assert payload["email"] == "a@example.com"
    assert payload["exp"] - payload["iat"] == int(timedelta(days=7).total_seconds())


def test_decode_token_round_trip(app):
    with app.app_context():
        token = create_token("650000000000000000000002", "b@example.com")
        identity = decode_token(token)

    assert identity == {"user_id": "650000000000000000000002", "email": "b@example.com"}


@pytest.mark.parametrize("token", ["invalid.token.here", "", "abc"])
def test_decode_token_malformed(app, token):
    with app.app_context():
        with pytest.raises(InvalidToken):
            decode_token(token)


def test_decode_token_wrong_secret(app):
    token = jwt.encode(
        {"sub": "x", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
        "another_secret",
        algorithm="HS256",
    )
    with app.app_context():
        with pytest.raises(InvalidToken):
            decode_token(token)


def test_decode_token_expired(app):
    token = jwt.encode(
        {"sub": "x", "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
        TEST_SECRET,
        algorithm="HS256",
    )
    with app.app_context():
        with pytest.raises(InvalidToken):
            decode_token(token)


def test_decode_token_without_subject(app):
    token = jwt.encode(
        {"email": "x@example.com", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
        TEST_SECRET,
        algorithm="HS256",
    )
    with app.app_context():
        with pytest.raises(InvalidToken):
            decode_token(token)


def test_verify_token_from_request_valid(app):
    with app.app_context():
        token = create_token("650000000000000000000003", "c@example.com")

    with app.test_request_context(headers={"Authorization": f"Bearer {token}"}):
        identity, err, code = verify_token_from_request()
        assert identity["user_id"] == "650000000000000000000003"
        assert err is None
        assert code is None


def test_verify_token_from_request_missing_header(app):
    with app.test_request_context():
        identity, err, code = verify_token_from_request()
        assert identity is None
        assert code == 401
        assert err.json["message"] == "Authorization header missing"


def test_verify_token_from_request_missing_token(app):
    with app.test_request_context(headers={"Authorization": "Bearer "}):
        identity, err, code = verify_token_from_request()
        assert identity is None
        assert code == 401
        assert err.json["message"] == "Token missing"


def test_verify_token_from_request_invalid_token(app):
    with app.test_request_context(headers={"Authorization": "Bearer not.a.jwt"}):
        identity, err, code = verify_token_from_request()
        assert identity is None
        assert code == 403
        assert err.json["message"] == "Invalid or expired token"


def test_public_user_hides_password(user_doc):
    projected = public_user(user_doc)
    assert set(projected) == {"id", "username", "email", "photoUrl"}
    assert projected["id"] == str(user_doc["_id"])
