"""
Authentication route handlers.

Provides routes for:
- User signup (/signup)
- User login (/login)
- Profile of the token holder (/api/user/me)

All JWT logic is delegated to `auth_service.utils`; account logic lives in
`auth_service.service`.
"""

import logging
from typing import Any, Dict, Tuple

from flask import Blueprint, g, jsonify, request, Response

from eventhub.auth_service.service import AuthService
from eventhub.auth_service.utils import token_required
from eventhub.database.db_connection import get_store

auth_bp = Blueprint("auth", __name__)


def get_auth_service() -> AuthService:
    return AuthService(get_store().user_store)


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


# --- REQUEST LOGGING ---
@auth_bp.before_request
def before_request() -> None:
    """
    Log every incoming request to the authentication routes.
    """
    logging.info(f"[Auth] Incoming {request.method} {request.path}")


@auth_bp.after_request
def after_request(response: Response) -> Response:
    """
    Log the response status code for every request.

    Args:
        response (Response): The Flask response object.

    Returns:
        Response: The passed-through response object.
    """
    logging.info(f"[Auth] Response {response.status}")
    return response


# --- SIGNUP ---
@auth_bp.route("/signup", methods=["POST"])
def signup() -> Tuple[Response, int]:
    """
    Register a new user and log them in.

    Expects a JSON body with:
    - username (str)
    - email (str): Unique email address.
    - photoUrl (str, optional)
    - password (str)

    Returns:
        201: message, token and the public user profile.
        400: Missing email or password.
        409: Email already in use.
        503: Store not connected yet.
    """
    data = json_body()

    result = get_auth_service().signup(
        data.get("username"),
        data.get("email"),
        data.get("photoUrl"),
        data.get("password"),
    )

    return jsonify({"message": "Signup successful", **result}), 201


# --- LOGIN ---
@auth_bp.route("/login", methods=["POST"])
def login() -> Tuple[Response, int]:
    """
    Authenticate a user and return a JWT.

    Expects a JSON body with:
    - email (str)
    - password (str)

    Returns:
        200: message, token and the public user profile.
        400: Missing credentials.
        401: Invalid credentials (wrong password or unknown email).
    """
    data = json_body()

    result = get_auth_service().login(data.get("email"), data.get("password"))

    return jsonify({"message": "Login successful", **result}), 200


# --- GET CURRENT USER ---
@auth_bp.route("/api/user/me", methods=["GET"])
@token_required
def get_current_user() -> Tuple[Response, int]:
    """
    Return the identity of the token holder.

    Requires Authorization header: Bearer <token>

    Returns:
        200: {id, username, email, photoUrl}
        401: Missing token, or the user no longer exists.
        403: Invalid or expired token.
    """
    return jsonify(g.current_user), 200
