"""Utilities for validating incoming Flask requests."""

from __future__ import annotations

import math
import re
from datetime import UTC, date, datetime
from typing import Iterable

from flask import Request
from werkzeug.exceptions import BadRequest

from utils.errors import InvalidIdentifier

_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def parse_json_request(
    req: Request,
    *,
    required_keys: Iterable[str] | None = None,
    allow_empty: bool = False,
) -> dict:
    """Return the parsed JSON body or raise a 400 error."""

    if not req.is_json:
        raise BadRequest("Request content type must be application/json.")

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request JSON body is required.")

    if not isinstance(data, dict):
        raise BadRequest("Request JSON payload must be an object.")

    if not data and not allow_empty:
        raise BadRequest("Request JSON body must not be empty.")

    if required_keys:
        missing = [key for key in required_keys if not data.get(key)]
        if missing:
            raise BadRequest(
                "Missing required fields: {}.".format(
                    ", ".join(sorted(missing))
                )
            )

    return data


def require_valid_id(value: str) -> str:
    """Reject identifiers that could never have been issued by the store."""

    if not isinstance(value, str) or not _ID_PATTERN.match(value):
        raise InvalidIdentifier()
    return value


def raise_for_errors(errors: list[str]) -> None:
    if errors:
        raise BadRequest("; ".join(errors))


def parse_text(
    value: object,
    field: str,
    errors: list[str],
    *,
    required: bool = False,
    max_length: int | None = None,
) -> str | None:
    """Return a trimmed string, or None when the value is null and allowed."""

    if value is None:
        if required:
            errors.append(f"{field} is required")
        return None
    if not isinstance(value, str):
        errors.append(f"{field} must be a string")
        return None
    text = value.strip()
    if required and not text:
        errors.append(f"{field} is required")
        return None
    if max_length is not None and len(text) > max_length:
        errors.append(f"{field} must be at most {max_length} characters")
        return None
    return text


def parse_int(
    value: object,
    field: str,
    errors: list[str],
    *,
    minimum: int | None = None,
    maximum: int | None = None,
    required: bool = False,
) -> int | None:
    if value is None:
        if required:
            errors.append(f"{field} is required")
        return None
    if isinstance(value, bool):
        errors.append(f"{field} must be an integer")
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int):
        errors.append(f"{field} must be an integer")
        return None
    if (minimum is not None and value < minimum) or (
        maximum is not None and value > maximum
    ):
        errors.append(f"{field} must be between {minimum} and {maximum}")
        return None
    return value


def parse_number(
    value: object,
    field: str,
    errors: list[str],
    *,
    minimum: float | None = None,
    maximum: float | None = None,
    required: bool = False,
) -> float | None:
    if value is None:
        if required:
            errors.append(f"{field} is required")
        return None
    # JSON bodies may carry NaN or Infinity, which slip past range comparisons.
    if (
        isinstance(value, bool)
        or not isinstance(value, (int, float))
        or not math.isfinite(value)
    ):
        errors.append(f"{field} must be a number")
        return None
    if (minimum is not None and value < minimum) or (
        maximum is not None and value > maximum
    ):
        errors.append(f"{field} must be between {minimum} and {maximum}")
        return None
    return float(value)


def parse_choice(
    value: object,
    field: str,
    choices: Iterable[str],
    errors: list[str],
    *,
    required: bool = False,
) -> str | None:
    if value is None:
        if required:
            errors.append(f"{field} is required")
        return None
    allowed = tuple(choices)
    if value not in allowed:
        errors.append(f"{field} must be one of {', '.join(allowed)}")
        return None
    return value


def parse_datetime(
    value: object,
    field: str,
    errors: list[str],
    *,
    required: bool = False,
) -> datetime | None:
    """Parse an ISO 8601 string into a naive UTC datetime."""

    if value is None or value == "":
        if required:
            errors.append(f"{field} is required")
        return None
    if not isinstance(value, str):
        errors.append(f"{field} must be ISO 8601 format")
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        errors.append(f"{field} must be ISO 8601 format")
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(UTC).replace(tzinfo=None)
    return parsed


def parse_date(value: object, field: str, errors: list[str]) -> date | None:
    """Parse a calendar day from either a date or a full ISO timestamp."""

    parsed = parse_datetime(value, field, errors)
    return parsed.date() if parsed is not None else None


def parse_string_list(value: object, field: str, errors: list[str]) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        errors.append(f"{field} must be a list of strings")
        return []
    return [item.strip() for item in value if item.strip()]
