"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AuthenticatedIdentity,
    AuthorizationSnapshot,
    GuardDecision,
    GuardKind,
    GuardState,
    ProfileOut,
    UserListItem,
    UsersListResponse,
)
from app.schemas.health import HealthResponse
from app.schemas.roles import (
    NO_PREVIOUS_ROLE,
    ErrorResponse,
    RoleUpdateRequest,
    RoleUpdateResult,
)

__all__ = [
    "NO_PREVIOUS_ROLE",
    "AuthenticatedIdentity",
    "AuthorizationSnapshot",
    "ErrorResponse",
    "GuardDecision",
    "GuardKind",
    "GuardState",
    "HealthResponse",
    "ProfileOut",
    "RoleUpdateRequest",
    "RoleUpdateResult",
    "UserListItem",
    "UsersListResponse",
]
