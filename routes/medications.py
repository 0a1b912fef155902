"""Medication endpoints, including the currently-active view."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from models import db, utcnow
from models.medication import Medication
from utils.auth import current_user_id, load_current_user
from utils.ownership import get_owned_or_abort, get_scoped_or_404
from utils.request_validation import (
    parse_datetime,
    parse_json_request,
    parse_string_list,
    parse_text,
    raise_for_errors,
    require_valid_id,
)

medications_bp = Blueprint("medications", __name__)


def _parse_reminders(value: object, errors: list[str]) -> list[dict]:
    if value is None:
        return []
    if not isinstance(value, list):
        errors.append("reminders must be a list")
        return []

    reminders = []
    for index, item in enumerate(value):
        if not isinstance(item, dict) or not isinstance(item.get("time"), str):
            errors.append(f"reminders[{index}].time is required")
            continue
        enabled = item.get("enabled", True)
        if not isinstance(enabled, bool):
            errors.append(f"reminders[{index}].enabled must be a boolean")
            continue
        reminders.append({"time": item["time"].strip(), "enabled": enabled})
    return reminders


def _parse_medication(payload: dict, *, partial: bool) -> dict:
    errors: list[str] = []
    fields: dict = {}

    def present(key: str) -> bool:
        return not partial or key in payload

    for key in ("name", "dosage", "frequency"):
        if present(key):
            fields[key] = parse_text(
                payload.get(key), key, errors, required=True, max_length=200
            )
    if present("startDate"):
        fields["start_date"] = parse_datetime(
            payload.get("startDate"), "startDate", errors, required=True
        )
    if present("endDate"):
        # null means the course is ongoing
        fields["end_date"] = parse_datetime(payload.get("endDate"), "endDate", errors)
    for key in ("purpose", "instructions"):
        if present(key):
            fields[key] = parse_text(payload.get(key), key, errors)
    if "isActive" in payload:
        if not isinstance(payload["isActive"], bool):
            errors.append("isActive must be a boolean")
        else:
            fields["is_active"] = payload["isActive"]
    if present("sideEffects"):
        fields["side_effects"] = parse_string_list(
            payload.get("sideEffects"), "sideEffects", errors
        )
    if present("reminders"):
        fields["reminders"] = _parse_reminders(payload.get("reminders"), errors)

    start, end = fields.get("start_date"), fields.get("end_date")
    if start is not None and end is not None and end < start:
        errors.append("endDate must not be before startDate")

    raise_for_errors(errors)
    return fields


@medications_bp.route("/<string:user_id>", methods=["GET"])
def list_medications(user_id: str):
    require_valid_id(user_id)
    medications = (
        Medication.query.filter_by(user_id=user_id)
        .order_by(Medication.start_date.desc())
        .all()
    )
    return jsonify([medication.to_dict() for medication in medications])


@medications_bp.route("/<string:user_id>/active", methods=["GET"])
def list_active_medications(user_id: str):
    """Medications flagged active whose end date is unset or not yet past."""
    require_valid_id(user_id)
    query = Medication.active_filter(Medication.query.filter_by(user_id=user_id))
    medications = query.order_by(Medication.start_date.desc()).all()
    return jsonify([medication.to_dict() for medication in medications])


@medications_bp.route("/<string:user_id>/<string:medication_id>", methods=["GET"])
def get_medication(user_id: str, medication_id: str):
    require_valid_id(user_id)
    require_valid_id(medication_id)
    medication = get_scoped_or_404(Medication, medication_id, user_id, label="Medication")
    return jsonify(medication.to_dict())


@medications_bp.route("", methods=["POST"])
@jwt_required()
def create_medication():
    payload = parse_json_request(request)
    fields = _parse_medication(payload, partial=False)

    medication = Medication(user_id=load_current_user().id, **fields)
    db.session.add(medication)
    db.session.commit()
    current_app.logger.info(
        "Medication %s added for user %s", medication.id, medication.user_id
    )

    return jsonify(medication.to_dict()), HTTPStatus.CREATED


@medications_bp.route("/<string:medication_id>", methods=["PUT"])
@jwt_required()
def update_medication(medication_id: str):
    require_valid_id(medication_id)
    medication = get_owned_or_abort(
        Medication, medication_id, current_user_id(), label="Medication", action="update"
    )
    payload = parse_json_request(request, allow_empty=True)
    fields = _parse_medication(payload, partial=True)

    start = fields.get("start_date", medication.start_date)
    end = fields["end_date"] if "end_date" in fields else medication.end_date
    if end is not None and start is not None and end < start:
        raise_for_errors(["endDate must not be before startDate"])

    for field, value in fields.items():
        setattr(medication, field, value)
    db.session.commit()

    return jsonify(medication.to_dict())


@medications_bp.route("/<string:medication_id>/terminate", methods=["PUT"])
@jwt_required()
def terminate_medication(medication_id: str):
    """Stop a course: mark it inactive and close it at ``endDate`` or now."""
    require_valid_id(medication_id)
    medication = get_owned_or_abort(
        Medication, medication_id, current_user_id(), label="Medication", action="update"
    )
    payload = request.get_json(silent=True) or {}
    if not isinstance(payload, dict):
        raise_for_errors(["Request JSON payload must be an object"])

    errors: list[str] = []
    end = parse_datetime(payload.get("endDate"), "endDate", errors)
    if end is not None and end < medication.start_date:
        errors.append("endDate must not be before startDate")
    raise_for_errors(errors)

    medication.is_active = False
    medication.end_date = end or utcnow()
    db.session.commit()
    current_app.logger.info("Medication %s terminated", medication_id)

    return jsonify(medication.to_dict())


@medications_bp.route("/<string:medication_id>", methods=["DELETE"])
@jwt_required()
def delete_medication(medication_id: str):
    require_valid_id(medication_id)
    medication = get_owned_or_abort(
        Medication, medication_id, current_user_id(), label="Medication", action="delete"
    )
    db.session.delete(medication)
    db.session.commit()
    current_app.logger.info("Medication %s deleted", medication_id)

    return jsonify({"message": "Medication removed."})
