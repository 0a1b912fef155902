"""Daily wellness log endpoints and the 30-day statistics view."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from models import db, utcnow
from models.wellness_log import WellnessLog
from utils.auth import current_user_id, load_current_user
from utils.ownership import get_owned_or_abort, get_scoped_or_404
from utils.persistence import commit_or_conflict
from utils.request_validation import (
    parse_date,
    parse_json_request,
    parse_number,
    parse_text,
    raise_for_errors,
    require_valid_id,
)
from utils.wellness_stats import summarize, window_start

wellness_bp = Blueprint("wellness", __name__)

DUPLICATE_DAY = "A wellness log already exists for this date."


def _nested(payload: dict, key: str, errors: list[str]) -> dict | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        errors.append(f"{key} must be an object")
        return None
    return value


def _parse_wellness(payload: dict, *, partial: bool) -> dict:
    """Map the camelCase body, with its nested sleep and nutrition objects, onto columns.

    Nested objects merge on update: ``{"sleep": {"hours": 7}}`` leaves the
    stored sleep quality alone, and ``"sleep": null`` clears both.
    """

    errors: list[str] = []
    fields: dict = {}

    def present(key: str) -> bool:
        return not partial or key in payload

    if "date" in payload:
        day = parse_date(payload["date"], "date", errors)
        if day is None and partial and payload["date"] in (None, ""):
            errors.append("date is required")
        fields["date"] = day
    for key in ("mood", "energy"):
        if present(key):
            fields[key] = parse_number(
                payload.get(key), key, errors, minimum=1, maximum=10, required=True
            )
    if present("stress"):
        fields["stress"] = parse_number(payload.get("stress"), "stress", errors, minimum=1, maximum=10)
    if present("physicalActivity"):
        fields["physical_activity"] = parse_number(
            payload.get("physicalActivity"), "physicalActivity", errors, minimum=0, maximum=600
        )
    if present("notes"):
        fields["notes"] = parse_text(payload.get("notes"), "notes", errors)

    if present("sleep"):
        sleep = _nested(payload, "sleep", errors)
        if sleep is None:
            fields["sleep_hours"] = fields["sleep_quality"] = None
        else:
            if not partial or "hours" in sleep:
                fields["sleep_hours"] = parse_number(
                    sleep.get("hours"), "sleep.hours", errors, minimum=0, maximum=24
                )
            if not partial or "quality" in sleep:
                fields["sleep_quality"] = parse_number(
                    sleep.get("quality"), "sleep.quality", errors, minimum=1, maximum=10
                )

    if present("nutrition"):
        nutrition = _nested(payload, "nutrition", errors)
        if nutrition is None:
            fields["nutrition_quality"] = fields["nutrition_hydration"] = None
        else:
            if not partial or "quality" in nutrition:
                fields["nutrition_quality"] = parse_number(
                    nutrition.get("quality"), "nutrition.quality", errors, minimum=1, maximum=10
                )
            if not partial or "hydration" in nutrition:
                fields["nutrition_hydration"] = parse_number(
                    nutrition.get("hydration"), "nutrition.hydration", errors, minimum=1, maximum=10
                )

    raise_for_errors(errors)
    return fields


@wellness_bp.route("/<string:user_id>", methods=["GET"])
def list_logs(user_id: str):
    require_valid_id(user_id)
    logs = (
        WellnessLog.query.filter_by(user_id=user_id)
        .order_by(WellnessLog.date.desc())
        .all()
    )
    return jsonify([log.to_dict() for log in logs])


@wellness_bp.route("/<string:user_id>/stats", methods=["GET"])
def get_stats(user_id: str):
    require_valid_id(user_id)
    since = window_start(utcnow().date())
    logs = (
        WellnessLog.query.filter(
            WellnessLog.user_id == user_id, WellnessLog.date >= since
        )
        .order_by(WellnessLog.date.asc())
        .all()
    )
    return jsonify(summarize(logs))


@wellness_bp.route("/<string:user_id>/<string:log_id>", methods=["GET"])
def get_log(user_id: str, log_id: str):
    require_valid_id(user_id)
    require_valid_id(log_id)
    log = get_scoped_or_404(WellnessLog, log_id, user_id, label="Wellness log")
    return jsonify(log.to_dict())


@wellness_bp.route("", methods=["POST"])
@jwt_required()
def create_log():
    payload = parse_json_request(request)
    fields = _parse_wellness(payload, partial=False)
    if fields.get("date") is None:
        fields["date"] = utcnow().date()

    log = WellnessLog(user_id=load_current_user().id, **fields)
    db.session.add(log)
    commit_or_conflict(DUPLICATE_DAY)
    current_app.logger.info("Wellness log %s recorded for user %s", log.id, log.user_id)

    return jsonify(log.to_dict()), HTTPStatus.CREATED


@wellness_bp.route("/<string:log_id>", methods=["PUT"])
@jwt_required()
def update_log(log_id: str):
    require_valid_id(log_id)
    log = get_owned_or_abort(
        WellnessLog, log_id, current_user_id(), label="Wellness log", action="update"
    )
    payload = parse_json_request(request, allow_empty=True)
    for field, value in _parse_wellness(payload, partial=True).items():
        setattr(log, field, value)
    # Moving a log onto a day that already has one trips the unique constraint.
    commit_or_conflict(DUPLICATE_DAY)

    return jsonify(log.to_dict())


@wellness_bp.route("/<string:log_id>", methods=["DELETE"])
@jwt_required()
def delete_log(log_id: str):
    require_valid_id(log_id)
    log = get_owned_or_abort(
        WellnessLog, log_id, current_user_id(), label="Wellness log", action="delete"
    )
    db.session.delete(log)
    db.session.commit()
    current_app.logger.info("Wellness log %s deleted", log_id)

    return jsonify({"message": "Wellness log removed."})
