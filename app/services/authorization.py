"""Authorization decision for a verified identity: profile, active flag and admin role."""

import logging

from sqlalchemy.orm import Session

from app.models import AppRole, UserRole
from app.schemas.auth import AuthenticatedIdentity, AuthorizationSnapshot, ProfileOut
from app.services.role_store import get_profile

logger = logging.getLogger(__name__)


def resolve_authorization(db: Session, identity: AuthenticatedIdentity) -> AuthorizationSnapshot:
    """
    Build the snapshot guards consume for one identity. Computed per call, never stored.

    No profile: profile None and not admin. Inactive profile: the profile is
    reported (is_active False) but admin is withheld whatever the role row says.
    """
    roles = [r for (r,) in db.query(UserRole.role).filter(UserRole.user_id == identity.id).all()]
    is_admin = any(AppRole(r) == AppRole.ADMIN for r in roles)

    profile = get_profile(db, identity.id)
    if profile is None:
        logger.warning("No profile found for user: %s", identity.id)
        return AuthorizationSnapshot(user=identity, profile=None, is_admin=False)

    profile_out = ProfileOut.model_validate(profile)
    if not profile_out.is_active:
        logger.info("Inactive profile for user: %s", identity.id)
        return AuthorizationSnapshot(user=identity, profile=profile_out, is_admin=False)

    return AuthorizationSnapshot(user=identity, profile=profile_out, is_admin=is_admin)
