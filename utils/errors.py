"""HTTP error types and the JSON error envelope."""

from __future__ import annotations

import uuid

from flask import g, jsonify
from werkzeug.exceptions import BadRequest, Unauthorized


class DuplicateResource(BadRequest):
    """A unique email or (user, date) pair already exists."""

    description = "Resource already exists."


class InvalidCredentials(BadRequest):
    """Unknown account or wrong password; deliberately indistinguishable."""

    description = "Invalid credentials."


class InvalidOrExpiredToken(BadRequest):
    description = "Invalid or expired token."


class InvalidIdentifier(BadRequest):
    description = "Invalid id."


class EmailNotVerified(Unauthorized):
    description = "Email not verified. Please check your inbox."
    extra = {"needsVerification": True}


def current_request_id() -> str:
    return g.get("request_id") or str(uuid.uuid4())


def json_error(status_code: int, error: str, message: str, **extra):
    """Build the JSON error response shared by every failure path."""

    request_id = current_request_id()
    payload = {"error": error, "message": message, "request_id": request_id}
    payload.update(extra)
    response = jsonify(payload)
    response.status_code = status_code
    response.headers.setdefault("X-Request-ID", request_id)
    return response
