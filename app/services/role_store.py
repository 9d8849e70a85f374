"""Role and profile store access: lookups plus single-statement role writes."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import AppRole, Profile, UserRole

logger = logging.getLogger(__name__)


class RoleWriteError(Exception):
    """Raised when inserting or updating a role assignment fails (constraint, connectivity)."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


def get_profile(db: Session, user_id: str) -> Profile | None:
    return db.query(Profile).filter(Profile.user_id == user_id).first()


def get_role(db: Session, user_id: str, for_update: bool = False) -> UserRole | None:
    """
    Return the user's role assignment, if any.

    for_update locks the row until commit on databases that support it, so a
    concurrent writer for the same user waits instead of interleaving.
    """
    query = db.query(UserRole).filter(UserRole.user_id == user_id)
    if for_update:
        query = query.with_for_update()
    return query.first()


def has_role(db: Session, user_id: str, role: AppRole) -> bool:
    return (
        db.query(UserRole.id)
        .filter(UserRole.user_id == user_id, UserRole.role == role)
        .first()
        is not None
    )


def is_user_active(db: Session, user_id: str) -> bool:
    profile = get_profile(db, user_id)
    return bool(profile is not None and profile.is_active)


def insert_role(db: Session, user_id: str, role: AppRole) -> UserRole:
    """Insert the first assignment for user_id. The unique constraint rejects duplicates."""
    assignment = UserRole(user_id=user_id, role=role)
    db.add(assignment)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Role insert rolled back: user_id=%s", user_id)
        raise RoleWriteError("Failed to insert role assignment.", cause=e) from e
    db.refresh(assignment)
    return assignment


def update_role(db: Session, assignment: UserRole, role: AppRole) -> UserRole:
    """Change an existing assignment in place (same row id)."""
    user_id = assignment.user_id
    assignment.role = role
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Role update rolled back: user_id=%s", user_id)
        raise RoleWriteError("Failed to update role assignment.", cause=e) from e
    db.refresh(assignment)
    return assignment


def list_users_with_roles(db: Session) -> list[tuple[Profile, UserRole | None]]:
    """All profiles (ordered by name) paired with their role assignment, if any."""
    rows = (
        db.query(Profile, UserRole)
        .outerjoin(UserRole, UserRole.user_id == Profile.user_id)
        .order_by(Profile.name, Profile.user_id)
        .all()
    )
    return [(profile, assignment) for profile, assignment in rows]
