"""
Events service routes: create, read, update, delete and join events.
"""

import logging
from typing import Any, Dict, Tuple

from flask import Blueprint, jsonify, request, Response

from eventhub.auth_service.utils import write_guard
from eventhub.database.db_connection import get_store
from eventhub.events_service.service import EventService

events_bp = Blueprint("events", __name__)


def get_event_service() -> EventService:
    return EventService(get_store().event_store)


def json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


@events_bp.before_request
def before_request() -> None:
    logging.info(f"[Events] Incoming {request.method} {request.path}")


@events_bp.after_request
def after_request(response: Response) -> Response:
    logging.info(f"[Events] Response {response.status}")
    return response


@events_bp.route("", methods=["POST"])
@write_guard
def create_event() -> Tuple[Response, int]:
    """
    Create an event.

    Required: title, name, dateTime, location, description, email.
    Optional: attendeeCount (defaults to 0).

    Returns:
        201: { "message": str, "eventId": str }
        400: Validation error.
        401/403: Authentication failure (when writes require auth).
    """
    event_id = get_event_service().create(json_body())
    return jsonify({"message": "Event added successfully", "eventId": event_id}), 201


@events_bp.route("", methods=["GET"])
def list_events() -> Tuple[Response, int]:
    """
    Return all events, newest first.
    """
    return jsonify(get_event_service().list_all()), 200


@events_bp.route("/id/<event_id>", methods=["GET"])
def get_event(event_id: str) -> Tuple[Response, int]:
    """
    Get a single event by ID.

    Returns:
        200: Event object.
        404: Event not found (or malformed id).
    """
    return jsonify(get_event_service().get(event_id)), 200


@events_bp.route("/<email>", methods=["GET"])
def list_my_events(email: str) -> Tuple[Response, int]:
    """
    Return the events whose owner email equals `email`.
    """
    return jsonify(get_event_service().list_by_owner(email)), 200


@events_bp.route("/join/<event_id>", methods=["PATCH"])
def join_event(event_id: str) -> Tuple[Response, int]:
    """
    Add one attendee to an event.

    Returns:
        200: Joined.
        404: Event not found (or malformed id).
    """
    get_event_service().join(event_id)
    return jsonify({"message": "Joined event successfully"}), 200


@events_bp.route("/<event_id>", methods=["PUT"])
@write_guard
def update_event(event_id: str) -> Tuple[Response, int]:
    """
    Update an event.

    Only title, name, dateTime, location, description and attendeeCount can
    change; any other key in the body is ignored.

    Returns:
        200: Updated (also when nothing changed).
        400: No updatable field, or an empty value.
        404: Event not found.
    """
    get_event_service().update(event_id, json_body())
    return jsonify({"message": "Event updated successfully"}), 200


@events_bp.route("/<event_id>", methods=["DELETE"])
@write_guard
def delete_event(event_id: str) -> Tuple[Response, int]:
    """
    Delete an event.

    Returns:
        200: Deleted.
        404: Event not found or already deleted.
    """
    get_event_service().delete(event_id)
    return jsonify({"message": "Event deleted successfully"}), 200
