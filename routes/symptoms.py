"""Symptom log endpoints."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from models import db
from models.symptom import Symptom
from utils.auth import current_user_id, load_current_user
from utils.ownership import get_owned_or_abort, get_scoped_or_404
from utils.request_validation import (
    parse_datetime,
    parse_int,
    parse_json_request,
    parse_text,
    raise_for_errors,
    require_valid_id,
)

symptoms_bp = Blueprint("symptoms", __name__)


def _parse_symptom(payload: dict, *, partial: bool) -> dict:
    """Validate the symptom fields present in ``payload``.

    On create every field is read and the required ones enforced. On update
    only keys present in the body are returned, so omitted fields stay as
    they are and an explicit null clears the optional ones.
    """

    errors: list[str] = []
    fields: dict = {}

    def present(key: str) -> bool:
        return not partial or key in payload

    if present("name"):
        fields["name"] = parse_text(
            payload.get("name"), "name", errors, required=True, max_length=200
        )
    if present("severity"):
        fields["severity"] = parse_int(
            payload.get("severity"), "severity", errors, minimum=1, maximum=10, required=True
        )
    for key in ("description", "duration", "triggers"):
        if present(key):
            fields[key] = parse_text(payload.get(key), key, errors)
    if "dateReported" in payload:
        fields["date_reported"] = parse_datetime(
            payload["dateReported"], "dateReported", errors, required=True
        )
    if "isActive" in payload:
        if not isinstance(payload["isActive"], bool):
            errors.append("isActive must be a boolean")
        else:
            fields["is_active"] = payload["isActive"]

    raise_for_errors(errors)
    return fields


@symptoms_bp.route("/<string:user_id>", methods=["GET"])
def list_symptoms(user_id: str):
    require_valid_id(user_id)
    symptoms = (
        Symptom.query.filter_by(user_id=user_id)
        .order_by(Symptom.date_reported.desc())
        .all()
    )
    return jsonify([symptom.to_dict() for symptom in symptoms])


@symptoms_bp.route("/<string:user_id>/<string:symptom_id>", methods=["GET"])
def get_symptom(user_id: str, symptom_id: str):
    require_valid_id(user_id)
    require_valid_id(symptom_id)
    symptom = get_scoped_or_404(Symptom, symptom_id, user_id, label="Symptom")
    return jsonify(symptom.to_dict())


@symptoms_bp.route("", methods=["POST"])
@jwt_required()
def create_symptom():
    payload = parse_json_request(request)
    fields = _parse_symptom(payload, partial=False)

    symptom = Symptom(user_id=load_current_user().id, **fields)
    db.session.add(symptom)
    db.session.commit()
    current_app.logger.info("Symptom %s recorded for user %s", symptom.id, symptom.user_id)

    return jsonify(symptom.to_dict()), HTTPStatus.CREATED


@symptoms_bp.route("/<string:symptom_id>", methods=["PUT"])
@jwt_required()
def update_symptom(symptom_id: str):
    require_valid_id(symptom_id)
    symptom = get_owned_or_abort(
        Symptom, symptom_id, current_user_id(), label="Symptom", action="update"
    )
    payload = parse_json_request(request, allow_empty=True)
    for field, value in _parse_symptom(payload, partial=True).items():
        setattr(symptom, field, value)
    db.session.commit()

    return jsonify(symptom.to_dict())


@symptoms_bp.route("/<string:symptom_id>", methods=["DELETE"])
@jwt_required()
def delete_symptom(symptom_id: str):
    require_valid_id(symptom_id)
    symptom = get_owned_or_abort(
        Symptom, symptom_id, current_user_id(), label="Symptom", action="delete"
    )
    db.session.delete(symptom)
    db.session.commit()
    current_app.logger.info("Symptom %s deleted", symptom_id)

    return jsonify({"message": "Symptom removed."})
