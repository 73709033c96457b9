"""
API gateway: combines the auth and events blueprints.
This is the entrypoint for local development (`python -m eventhub.gateway.server`).
"""

import logging
from typing import Any, Dict, Optional, Tuple

from flask import Flask, jsonify, Response
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from eventhub.config import Config
from eventhub.database.db_connection import MongoStore, get_store, init_store
from eventhub.errors import ApiError

LIVENESS_MESSAGE = "Event management server is running!"


def configure_logging(level: str) -> None:
    # Basic console logging during API requests
    logging.basicConfig(level=level, format="[%(levelname)s] %(asctime)s - %(message)s")


def register_error_handlers(app: Flask) -> None:
    """
    Render every failure as {"message": ...} with its status code.
    """

    @app.errorhandler(ApiError)
    def handle_api_error(error: ApiError) -> Tuple[Response, int]:
        return jsonify({"message": error.message}), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException) -> Tuple[Response, int]:
        return jsonify({"message": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception) -> Tuple[Response, int]:
        logging.exception(f"Unhandled error: {error}")
        return jsonify({"message": "Internal server error"}), 500


def create_app(config_overrides: Optional[Dict[str, Any]] = None, store: Optional[MongoStore] = None) -> Flask:
    """
    Application factory for creating the Flask app.

    Args:
        config_overrides (dict, optional): Settings applied on top of Config.
        store (MongoStore, optional): Store context to use instead of
            connecting a new one from MONGO_URI.

    Returns:
        Flask: The configured Flask application.

    Raises:
        RuntimeError: If JWT_SECRET is not configured.
    """
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    if not app.config.get("JWT_SECRET"):
        raise RuntimeError("JWT_SECRET is missing. Set it in .env")

    configure_logging(app.config["LOG_LEVEL"])

    CORS(app, resources={
        r"/*": {
            "origins": app.config["CORS_ORIGINS"],
            "methods": ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
            "allow_headers": ["Content-Type", "Authorization"],
        }
    })

    init_store(app, store)

    # --- REGISTER BLUEPRINTS ---
    from eventhub.auth_service.routes import auth_bp
    from eventhub.events_service.routes import events_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(events_bp, url_prefix="/api/events")
    logging.info("All blueprints registered successfully.")

    register_error_handlers(app)

    # --- BASIC HEALTH CHECKPOINTS ---
    @app.route("/")
    def ping():
        """
        Root URL for simple 'online' check.
        """
        return LIVENESS_MESSAGE, 200, {"Content-Type": "text/plain; charset=utf-8"}

    @app.route("/health")
    def health():
        """
        Health check endpoint, reporting whether the store is connected.
        """
        ready = get_store().is_ready
        return jsonify({"status": "ok", "store": "ready" if ready else "unavailable"}), 200

    return app


if __name__ == "__main__":
    app = create_app()
    port = app.config["PORT"]
    logging.info(f"Server running at http://localhost:{port}")
    app.run(host="0.0.0.0", port=port)
