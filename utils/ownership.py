"""Ownership checks for user-scoped resources.

Reads are scoped by a query filter on the owner, so another user's entity is
simply not found. Writes load by id alone and then compare owners, which lets
them answer 403 instead of 404. The check itself returns a tagged result;
translation to HTTP happens in ``get_owned_or_abort`` at the view boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from werkzeug.exceptions import Forbidden, NotFound

from models import db


class Access(Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class OwnershipResult:
    access: Access
    entity: Any = None


def check_ownership(model, entity_id: str, owner_id: str) -> OwnershipResult:
    entity = db.session.get(model, entity_id)
    if entity is None:
        return OwnershipResult(Access.NOT_FOUND)
    if entity.user_id != owner_id:
        return OwnershipResult(Access.FORBIDDEN)
    return OwnershipResult(Access.OK, entity)


def get_owned_or_abort(model, entity_id: str, owner_id: str, *, label: str, action: str):
    """Return the entity when ``owner_id`` owns it, else raise 404 or 403."""

    result = check_ownership(model, entity_id, owner_id)
    if result.access is Access.NOT_FOUND:
        raise NotFound(f"{label} not found.")
    if result.access is Access.FORBIDDEN:
        raise Forbidden(f"Not authorized to {action} this {label.lower()}.")
    return result.entity


def get_scoped_or_404(model, entity_id: str, owner_id: str, *, label: str):
    """Owner-filtered lookup used by read routes."""

    entity = model.query.filter_by(id=entity_id, user_id=owner_id).first()
    if entity is None:
        raise NotFound(f"{label} not found.")
    return entity
