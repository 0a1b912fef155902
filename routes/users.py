"""Self-service user profile endpoints under ``/auth/users``."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required
from werkzeug.exceptions import Forbidden, NotFound

from models import db
from models.user import GENDERS, User
from utils.auth import current_user_id
from utils.request_validation import (
    parse_choice,
    parse_int,
    parse_json_request,
    parse_string_list,
    parse_text,
    raise_for_errors,
    require_valid_id,
)

users_bp = Blueprint("users", __name__)


def _load_self(user_id: str, action: str) -> User:
    """Return the caller's own row; any other id is refused before lookup."""

    require_valid_id(user_id)
    if user_id != current_user_id():
        raise Forbidden(f"Not authorized to {action} this user.")
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFound("User not found.")
    return user


@users_bp.route("/<string:user_id>", methods=["GET"])
@jwt_required()
def get_user(user_id: str):
    return jsonify(_load_self(user_id, "view").to_dict())


@users_bp.route("/<string:user_id>", methods=["PUT"])
@jwt_required()
def update_user(user_id: str):
    user = _load_self(user_id, "update")
    payload = parse_json_request(request, allow_empty=True)

    errors: list[str] = []
    changes: dict = {}
    if "name" in payload:
        changes["name"] = parse_text(payload["name"], "name", errors, required=True, max_length=120)
    if "age" in payload:
        changes["age"] = parse_int(payload["age"], "age", errors, minimum=0, maximum=120)
    if "gender" in payload:
        changes["gender"] = parse_choice(payload["gender"], "gender", GENDERS, errors)
    if "medicalConditions" in payload:
        changes["medical_conditions"] = parse_string_list(
            payload["medicalConditions"], "medicalConditions", errors
        )
    if "allergies" in payload:
        changes["allergies"] = parse_string_list(payload["allergies"], "allergies", errors)
    raise_for_errors(errors)

    for field, value in changes.items():
        setattr(user, field, value)
    db.session.commit()

    return jsonify(user.to_dict())


@users_bp.route("/<string:user_id>", methods=["DELETE"])
@jwt_required()
def delete_user(user_id: str):
    """Delete the caller's account together with every entity they own."""
    user = _load_self(user_id, "delete")
    db.session.delete(user)
    db.session.commit()
    current_app.logger.info("User %s deleted", user_id)

    return jsonify({"message": "User removed."})
