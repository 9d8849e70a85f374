"""Auth dependencies (get_current_identity, require_admin) and session authorization endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.schemas.auth import (
    AuthenticatedIdentity,
    AuthorizationSnapshot,
    GuardDecision,
    GuardKind,
)
from app.services.authorization import resolve_authorization
from app.services.identity import (
    IdentityProvider,
    IdentityVerificationError,
    get_identity_provider,
)
from app.services.route_guards import get_guard

router = APIRouter()
security = HTTPBearer(auto_error=False)


async def get_optional_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    identity_provider: Annotated[IdentityProvider, Depends(get_identity_provider)],
) -> AuthenticatedIdentity | None:
    """Dependency: the caller's identity, or None when no valid Bearer token is sent."""
    if credentials is None:
        return None
    try:
        return await identity_provider.verify(credentials.credentials)
    except IdentityVerificationError:
        return None


async def get_current_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    identity_provider: Annotated[IdentityProvider, Depends(get_identity_provider)],
) -> AuthenticatedIdentity:
    """Dependency: require a valid Bearer token and return the identity. Raises 401 if missing or invalid."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return await identity_provider.verify(credentials.credentials)
    except IdentityVerificationError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_current_authorization(
    identity: Annotated[AuthenticatedIdentity, Depends(get_current_identity)],
    db: Annotated[Session, Depends(get_db)],
) -> AuthorizationSnapshot:
    return resolve_authorization(db, identity)


def require_admin(
    snapshot: Annotated[AuthorizationSnapshot, Depends(get_current_authorization)],
) -> AuthorizationSnapshot:
    """Dependency: require an active profile with the 'admin' role. Raises 403 otherwise."""
    if snapshot.profile is None or not snapshot.profile.is_active or not snapshot.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return snapshot


@router.get("/me", response_model=AuthorizationSnapshot, response_model_by_alias=True)
def get_me(
    snapshot: Annotated[AuthorizationSnapshot, Depends(get_current_authorization)],
) -> AuthorizationSnapshot:
    """Current user's identity, profile and admin flag ({user, profile, isAdmin, isLoading})."""
    return snapshot


@router.get("/access", response_model=GuardDecision, response_model_by_alias=True)
def get_access(
    identity: Annotated[AuthenticatedIdentity | None, Depends(get_optional_identity)],
    db: Annotated[Session, Depends(get_db)],
    guard: Annotated[GuardKind, Query()] = "authenticated",
) -> GuardDecision:
    """
    Evaluate a route guard for the caller. Anonymous or invalid sessions get the
    unauthenticated decision (redirect to sign-in) rather than a 401.
    """
    if identity is None:
        snapshot = AuthorizationSnapshot()
    else:
        snapshot = resolve_authorization(db, identity)
    return get_guard(guard).evaluate(snapshot)
