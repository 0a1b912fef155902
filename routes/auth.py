"""Authentication blueprint: registration, login, email verification and passwords."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required
from werkzeug.exceptions import BadRequest

from models import db, utcnow
from models.user import GENDERS, LANGUAGES, MAX_PASSWORD_BYTES, User
from notifications import messages
from utils.auth import issue_session_token, load_current_user
from utils.errors import EmailNotVerified, InvalidCredentials, InvalidOrExpiredToken
from utils.persistence import commit_or_conflict
from utils.request_validation import (
    parse_choice,
    parse_int,
    parse_json_request,
    parse_text,
    raise_for_errors,
)

auth_bp = Blueprint("auth", __name__)

ALREADY_REGISTERED = "User already registered."
REGISTERED_MESSAGE = "User registered. Check your email to complete the registration."
RESEND_MESSAGE = "If an account exists for this email, a new verification link has been sent."
ALREADY_VERIFIED_MESSAGE = "Email already verified."
FORGOT_MESSAGE = "If an account exists for this email, a password reset link has been sent."


def _mailer():
    return current_app.extensions["mailer"]


def _validate_password(value: object, field: str, errors: list[str]) -> str | None:
    if not isinstance(value, str) or not value:
        errors.append(f"{field} is required")
        return None
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        errors.append(f"{field} must be at most {MAX_PASSWORD_BYTES} bytes")
        return None
    return value


def _send_verification(user: User, token: str) -> None:
    subject, html = messages.verification_email(
        user.name, current_app.config["FRONTEND_URL"], token
    )
    _mailer().send_later(user.email, subject, html)


def _production() -> bool:
    return current_app.config.get("APP_ENV") == "production"


@auth_bp.route("/register", methods=["POST"])
def register() -> tuple:
    """Create an account, start email verification and sign the user in."""
    payload = parse_json_request(request)
    errors: list[str] = []
    name = parse_text(payload.get("name"), "name", errors, required=True, max_length=120)
    email = User.normalize_email(payload.get("email"))
    if not email or "@" not in email:
        errors.append("a valid email is required")
    password = _validate_password(payload.get("password"), "password", errors)
    language = parse_choice(payload.get("language"), "language", LANGUAGES, errors)
    raise_for_errors(errors)

    if User.find_by_email(email) is not None:
        current_app.logger.info("Registration refused, email already in use")
        raise BadRequest(ALREADY_REGISTERED)

    user = User(name=name, email=email, language=language or "italian")
    user.set_password(password)
    token = user.generate_verification_token()
    db.session.add(user)
    # The unique index still guards against a concurrent registration.
    commit_or_conflict(ALREADY_REGISTERED)
    current_app.logger.info("User registered: %s", user.id)

    _send_verification(user, token)

    return (
        jsonify(
            {
                "token": issue_session_token(user.id),
                "user": user.to_dict(),
                "message": REGISTERED_MESSAGE,
            }
        ),
        HTTPStatus.CREATED,
    )


@auth_bp.route("/login", methods=["POST"])
def login() -> tuple:
    """Authenticate a user and return a session token."""
    payload = parse_json_request(request)
    email = User.normalize_email(payload.get("email"))
    password = payload.get("password")

    if not email or not isinstance(password, str) or not password:
        raise BadRequest("Email and password are required.")

    user = User.find_by_email(email)
    if user is None or not user.check_password(password):
        raise InvalidCredentials()

    if not user.is_email_verified:
        if _production():
            raise EmailNotVerified()
        current_app.logger.debug("Email verification bypassed outside production: %s", user.id)

    user.last_login = utcnow()
    db.session.commit()

    return (
        jsonify({"token": issue_session_token(user.id), "user": user.to_dict()}),
        HTTPStatus.OK,
    )


@auth_bp.route("/verify-email/<string:token>", methods=["GET"])
def verify_email(token: str):
    user = User.find_by_verification_token(token)
    if user is None:
        raise InvalidOrExpiredToken()

    user.mark_email_verified()
    db.session.commit()
    current_app.logger.info("Email verified for user %s", user.id)
    return jsonify({"message": "Email verified. You can now log in."})


@auth_bp.route("/resend-verification", methods=["POST"])
def resend_verification():
    """Send a fresh verification link without revealing whether the account exists."""
    payload = parse_json_request(request, required_keys=["email"])
    user = User.find_by_email(payload.get("email"))

    if user is not None and user.is_email_verified:
        return jsonify({"message": ALREADY_VERIFIED_MESSAGE})

    if user is not None:
        token = user.generate_verification_token()
        db.session.commit()
        _send_verification(user, token)

    return jsonify({"message": RESEND_MESSAGE})


@auth_bp.route("/forgot-password", methods=["POST"])
def forgot_password():
    """Start a password reset; the response is identical for unknown emails."""
    payload = parse_json_request(request, required_keys=["email"])
    user = User.find_by_email(payload.get("email"))

    if user is not None:
        token = user.generate_password_reset_token()
        db.session.commit()
        subject, html = messages.password_reset_email(
            user.name, current_app.config["FRONTEND_URL"], token
        )
        _mailer().send_later(user.email, subject, html)

    return jsonify({"message": FORGOT_MESSAGE})


@auth_bp.route("/reset-password", methods=["POST"])
def reset_password():
    payload = parse_json_request(request)
    errors: list[str] = []
    token = parse_text(payload.get("token"), "token", errors, required=True)
    password = _validate_password(payload.get("password"), "password", errors)
    raise_for_errors(errors)

    user = User.find_by_reset_token(token)
    if user is None:
        raise InvalidOrExpiredToken()

    user.set_password(password)
    user.clear_password_reset()
    db.session.commit()
    current_app.logger.info("Password reset for user %s", user.id)

    subject, html = messages.password_changed_email(user.name)
    _mailer().send(user.email, subject, html)

    return jsonify({"message": "Password has been reset. You can now log in."})


@auth_bp.route("/user", methods=["GET"])
@jwt_required()
def get_user():
    return jsonify(load_current_user().to_dict())


@auth_bp.route("/user", methods=["PUT"])
@jwt_required()
def update_user():
    """Update the caller's name, language, age or gender."""
    user = load_current_user()
    payload = parse_json_request(request, allow_empty=True)

    errors: list[str] = []
    changes: dict = {}
    if "name" in payload:
        changes["name"] = parse_text(payload["name"], "name", errors, required=True, max_length=120)
    if "language" in payload:
        changes["language"] = parse_choice(
            payload["language"], "language", LANGUAGES, errors, required=True
        )
    if "age" in payload:
        changes["age"] = parse_int(payload["age"], "age", errors, minimum=0, maximum=120)
    if "gender" in payload:
        changes["gender"] = parse_choice(payload["gender"], "gender", GENDERS, errors)
    raise_for_errors(errors)

    for field, value in changes.items():
        setattr(user, field, value)
    db.session.commit()

    return jsonify(user.to_dict())


@auth_bp.route("/change-password", methods=["PUT"])
@jwt_required()
def change_password():
    user = load_current_user()
    payload = parse_json_request(request)

    errors: list[str] = []
    current_password = payload.get("currentPassword")
    if not isinstance(current_password, str) or not current_password:
        errors.append("currentPassword is required")
    new_password = _validate_password(payload.get("newPassword"), "newPassword", errors)
    raise_for_errors(errors)

    if not user.check_password(current_password):
        raise InvalidCredentials("Current password is incorrect.")

    user.set_password(new_password)
    db.session.commit()
    current_app.logger.info("Password changed for user %s", user.id)

    return jsonify({"message": "Password updated."})
