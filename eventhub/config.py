"""
Environment-driven settings for the EventHub backend.

Values are read once from the process environment (and a local .env file,
if present) when this module is imported.
"""

import os
from dotenv import load_dotenv

# Load .env only once here
load_dotenv()

DEFAULT_CORS_ORIGINS = (
    "https://ph-event-chandonkumar23s-projects.vercel.app,"
    "http://localhost:5173,"
    "https://event-149a2.web.app"
)


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Default configuration, overridable per app via create_app()."""

    MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "eventDB")

    # No fallback: a missing secret is a startup error in create_app()
    JWT_SECRET = os.getenv("JWT_SECRET")
    TOKEN_EXPIRATION_DAYS = int(os.getenv("TOKEN_EXPIRATION_DAYS", 7))

    PORT = int(os.getenv("PORT", 5000))
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS).split(",")
        if origin.strip()
    ]

    # When False, event mutation routes are open to anonymous callers
    REQUIRE_AUTH_FOR_WRITES = _env_flag("REQUIRE_AUTH_FOR_WRITES", True)

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
