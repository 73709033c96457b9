"""
Shared authentication helpers.
Provides token creation, verification, and the token_required guard.
"""

import logging
from datetime import datetime, timedelta, timezone
from functools import wraps
from typing import Any, Callable, Dict, Optional, Tuple

import jwt
from flask import current_app, g, jsonify, request, Response

from eventhub.database.db_connection import get_store
from eventhub.errors import InvalidToken, Unauthorized

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"


def normalize_email(email: Any) -> str:
    """Trim and lowercase an email; non-strings become ""."""
    if not isinstance(email, str):
        return ""
    return email.strip().lower()


def public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    """
    Project a user document to the fields safe to return to clients.

    The password hash never leaves this function.
    """
    return {
        "id": str(user["_id"]),
        "username": user.get("username"),
        "email": user.get("email"),
        "photoUrl": user.get("photoUrl"),
    }


# --- JWT CREATION ---
def create_token(user_id: Any, email: str) -> str:
    """
    Generates a new JWT for a given user.

    Args:
        user_id: The unique ID of the user (ObjectId or its hex string).
        email (str): The identity claim embedded next to the id.

    Returns:
        str: Encoded JWT string, valid for TOKEN_EXPIRATION_DAYS.
    """
    now = datetime.now(timezone.utc)
    days = current_app.config["TOKEN_EXPIRATION_DAYS"]

    payload = {
        "sub": str(user_id),
        "email": email,
        "iat": now,
        "exp": now + timedelta(days=days),
    }

    return jwt.encode(payload, current_app.config["JWT_SECRET"], algorithm=JWT_ALGORITHM)


# --- JWT VALIDATION ---
def decode_token(token: str) -> Dict[str, Any]:
    """
    Verify a JWT and return the identity it carries.

    Args:
        token (str): JWT string.

    Returns:
        dict: {"user_id": str, "email": str}

    Raises:
        InvalidToken: Malformed, wrongly signed, expired, or missing `sub`.
    """
    try:
        payload = jwt.decode(
            token,
            current_app.config["JWT_SECRET"],
            algorithms=[JWT_ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except jwt.PyJWTError as e:
        logger.info(f"Rejected token: {e}")
        raise InvalidToken()

    return {"user_id": payload["sub"], "email": payload.get("email")}


def verify_token_from_request() -> Tuple[Optional[Dict[str, Any]], Optional[Response], Optional[int]]:
    """
    Verify the JWT in the Authorization header.

    Returns:
        tuple: (identity, error_response, status_code)
               If successful, error_response and status_code are None.
               If failed, identity is None. A missing header or token gives
               401; a token that does not verify gives 403.
    """
    auth = request.headers.get("Authorization", "")

    if not auth:
        return None, jsonify({"message": Unauthorized.default_message}), Unauthorized.status_code

    parts = auth.split(" ", 1)
    token = parts[1].strip() if len(parts) == 2 else ""
    if parts[0] != "Bearer" or not token:
        return None, jsonify({"message": "Token missing"}), Unauthorized.status_code

    try:
        identity = decode_token(token)
    except InvalidToken as e:
        return None, jsonify({"message": e.message}), e.status_code

    return identity, None, None


def token_required(view: Callable) -> Callable:
    """
    Guard a view with token verification.

    On success the caller's public profile is attached as g.current_user.
    A valid token whose user no longer exists is rejected with 401.
    """

    @wraps(view)
    def wrapper(*args, **kwargs):
        identity, err, code = verify_token_from_request()
        if err:
            return err, code

        user = get_store().user_store.find_by_id(identity["user_id"])
        if not user:
            return jsonify({"message": "User not found"}), 401

        g.current_user = public_user(user)
        return view(*args, **kwargs)

    return wrapper


def write_guard(view: Callable) -> Callable:
    """
    Apply token_required only when REQUIRE_AUTH_FOR_WRITES is enabled.
    """
    guarded = token_required(view)

    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_app.config["REQUIRE_AUTH_FOR_WRITES"]:
            return guarded(*args, **kwargs)
        return view(*args, **kwargs)

    return wrapper
