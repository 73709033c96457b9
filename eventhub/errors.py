"""Error types raised by the stores and services.

Each error carries the HTTP status it maps to and a user-safe message; the
gateway renders them as ``{"message": ...}``.
"""


class ApiError(Exception):
    """Base error with a user-safe message and HTTP status."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ApiError):
    status_code = 400
    default_message = "Invalid request"


class DuplicateEmail(ApiError):
    status_code = 409
    default_message = "Email already in use"


class UserNotFound(ApiError):
    # Same message as InvalidCredentials so callers cannot probe for accounts
    status_code = 401
    default_message = "Invalid email or password"


class InvalidCredentials(ApiError):
    status_code = 401
    default_message = "Invalid email or password"


class Unauthorized(ApiError):
    status_code = 401
    default_message = "Authorization header missing"


class InvalidToken(ApiError):
    status_code = 403
    default_message = "Invalid or expired token"


class ResourceNotFound(ApiError):
    status_code = 404
    default_message = "Resource not found"


class StoreUnavailable(ApiError):
    status_code = 503
    default_message = "Server not ready"
