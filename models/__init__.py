"""Database initialization and model exports."""

import uuid
from datetime import UTC, datetime

from flask_sqlalchemy import SQLAlchemy


db = SQLAlchemy()


def generate_id() -> str:
    """Return a new opaque entity identifier."""

    return uuid.uuid4().hex


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how DateTime columns are stored."""

    return datetime.now(UTC).replace(tzinfo=None)


def isoformat(value) -> str | None:
    return value.isoformat() if value else None


# Import models to register them with SQLAlchemy metadata.
from .user import User  # noqa: E402,F401
from .symptom import Symptom  # noqa: E402,F401
from .medication import Medication  # noqa: E402,F401
from .wellness_log import WellnessLog  # noqa: E402,F401

__all__ = [
    "db",
    "generate_id",
    "utcnow",
    "User",
    "Symptom",
    "Medication",
    "WellnessLog",
]
