"""Admin user list: profiles with their current role."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import require_admin
from app.core.database import get_db
from app.models import AppRole
from app.schemas.auth import AuthorizationSnapshot, UserListItem, UsersListResponse
from app.schemas.roles import NO_PREVIOUS_ROLE
from app.services.role_store import list_users_with_roles

router = APIRouter()


@router.get("", response_model=UsersListResponse)
def list_users(
    _admin: Annotated[AuthorizationSnapshot, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    """List all users with their role (admin only)."""
    rows = list_users_with_roles(db)
    return UsersListResponse(
        users=[
            UserListItem(
                user_id=profile.user_id,
                name=profile.name,
                email=profile.email,
                is_active=bool(profile.is_active),
                role=AppRole(assignment.role).value if assignment is not None else NO_PREVIOUS_ROLE,
            )
            for profile, assignment in rows
        ]
    )
