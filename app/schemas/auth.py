"""Request/response schemas for identity, authorization snapshots and route-guard decisions."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

# Guard states: "loading" is the only non-terminal one.
GuardState = Literal[
    "loading",
    "unauthenticated",
    "inactive_profile",
    "authorized",
    "authorized_non_admin",
]

GuardKind = Literal["authenticated", "admin"]


class AuthenticatedIdentity(BaseModel):
    """Identity resolved from a verified access token."""

    id: str = Field(..., min_length=1, description="Identity provider user id")
    email: str | None = Field(default=None, description="Email claim, when present")


class ProfileOut(BaseModel):
    """Profile fields exposed to clients and guards."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    email: str = ""
    is_active: bool


class AuthorizationSnapshot(BaseModel):
    """
    What the authorization context knows about the current session.

    Serialized with camelCase keys (user, profile, isAdmin, isLoading) for SPA clients.
    """

    model_config = ConfigDict(populate_by_name=True)

    user: AuthenticatedIdentity | None = None
    profile: ProfileOut | None = None
    is_admin: bool = Field(default=False, alias="isAdmin")
    is_loading: bool = Field(default=False, alias="isLoading")


class GuardDecision(BaseModel):
    """Outcome of evaluating a route guard: render children, wait, or redirect."""

    model_config = ConfigDict(populate_by_name=True)

    state: GuardState
    redirect_to: str | None = Field(default=None, alias="redirectTo")

    @property
    def renders(self) -> bool:
        """True when protected content should be rendered."""
        return self.state == "authorized"

    @property
    def is_pending(self) -> bool:
        return self.state == "loading"


class UserListItem(BaseModel):
    """User entry for the admin list: profile plus current role ("none" when unassigned)."""

    user_id: str
    name: str
    email: str
    is_active: bool
    role: str


class UsersListResponse(BaseModel):
    """Response for GET /users (admin only)."""

    users: list[UserListItem]
