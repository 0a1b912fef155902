"""Session token issuing and the JSON responses of the bearer-token gate."""

from __future__ import annotations

from datetime import timedelta

from flask_jwt_extended import JWTManager, create_access_token, get_jwt_identity
from werkzeug.exceptions import NotFound

from models import db
from models.user import User
from utils.errors import json_error

MISSING_TOKEN_MESSAGE = "No token, authorization denied."
INVALID_TOKEN_MESSAGE = "Invalid token."


def issue_session_token(user_id: str, ttl: timedelta | None = None) -> str:
    """Sign a session token for ``user_id``; ``ttl`` overrides the configured expiry."""

    return create_access_token(
        identity=user_id,
        additional_claims={"user": {"id": user_id}},
        expires_delta=ttl,
    )


def current_user_id() -> str:
    """Identity of the authenticated caller. Only valid under ``jwt_required``."""

    return str(get_jwt_identity())


def load_current_user() -> User:
    """Row of the authenticated caller; a token outliving its account is a 404."""

    user = db.session.get(User, current_user_id())
    if user is None:
        raise NotFound("User not found.")
    return user


def register_token_handlers(jwt: JWTManager) -> None:
    """Answer every token failure with the same 401 envelope.

    Malformed, tampered and expired tokens share one message so callers cannot
    tell which check failed.
    """

    @jwt.unauthorized_loader
    def _missing_token(_reason: str):
        return json_error(401, "Unauthorized", MISSING_TOKEN_MESSAGE)

    @jwt.invalid_token_loader
    def _invalid_token(_reason: str):
        return json_error(401, "Unauthorized", INVALID_TOKEN_MESSAGE)

    @jwt.expired_token_loader
    def _expired_token(_jwt_header, _jwt_payload):
        return json_error(401, "Unauthorized", INVALID_TOKEN_MESSAGE)
