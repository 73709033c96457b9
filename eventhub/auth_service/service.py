"""
Signup and login logic, independent of the HTTP layer.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from pymongo.errors import DuplicateKeyError

from eventhub.auth_service.utils import create_token, normalize_email, public_user
from eventhub.database.stores import UserStore
from eventhub.errors import DuplicateEmail, InvalidCredentials, UserNotFound, ValidationError

logger = logging.getLogger(__name__)


class AuthService:
    """Creates accounts and exchanges credentials for tokens."""

    def __init__(self, users: UserStore, hasher: Optional[PasswordHasher] = None) -> None:
        self._users = users
        self._hasher = hasher or PasswordHasher()

    def signup(self, username: str, email: str, photo_url: Optional[str], password: str) -> Dict[str, Any]:
        """
        Create an account and issue its first token.

        Returns:
            dict: {"token": str, "user": public profile}

        Raises:
            ValidationError: email or password missing.
            DuplicateEmail: an account already uses this email.
        """
        email = normalize_email(email)
        if not email or not password or not isinstance(password, str):
            raise ValidationError("Email and password are required")

        if self._users.find_by_email(email):
            raise DuplicateEmail()

        user = {
            "username": username,
            "email": email,
            "photoUrl": photo_url,
            "password": self._hasher.hash(password),
            "createdAt": datetime.now(timezone.utc),
        }

        try:
            user_id = self._users.insert(user)
        except DuplicateKeyError:
            # Lost the race against a concurrent signup with the same email
            raise DuplicateEmail()

        user["_id"] = user_id
        logger.info(f"Created user {user_id}")

        return {"token": create_token(user_id, email), "user": public_user(user)}

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """
        Verify credentials and issue a token.

        Raises:
            ValidationError: email or password missing.
            UserNotFound: no account with this email.
            InvalidCredentials: the password does not match.
        """
        email = normalize_email(email)
        if not email or not password or not isinstance(password, str):
            raise ValidationError("Email and password are required")

        user = self._users.find_by_email(email)
        if not user:
            raise UserNotFound()

        try:
            self._hasher.verify(user["password"], password)
        except (VerificationError, InvalidHashError):
            raise InvalidCredentials()

        return {"token": create_token(user["_id"], user["email"]), "user": public_user(user)}
