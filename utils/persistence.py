"""Session helpers shared by the blueprints."""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError

from models import db
from utils.errors import DuplicateResource


def commit_or_conflict(message: str) -> None:
    """Commit, turning a unique-constraint violation into a 400 conflict."""

    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        raise DuplicateResource(message) from exc
