"""
Privileged role update: the only sanctioned path to change a user's role.

Runs with service-level database credentials, so it authenticates and
authorizes the caller itself instead of relying on row-level policies.
"""

import json
import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.core.logging import get_audit_logger
from app.models import AppRole
from app.schemas.auth import AuthenticatedIdentity
from app.schemas.roles import NO_PREVIOUS_ROLE, RoleUpdateResult
from app.services.identity import IdentityProvider, IdentityVerificationError
from app.services.role_store import (
    RoleWriteError,
    get_profile,
    get_role,
    has_role,
    insert_role,
    update_role,
)

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Missing required fields: targetUserId and newRole"
INVALID_ROLE_MESSAGE = f"Invalid role. Must be one of: {', '.join(AppRole.values())}"
SELF_MODIFICATION_MESSAGE = "You cannot modify your own role"


class RoleUpdateError(Exception):
    """Base for every failure of update_user_role. status_code is the HTTP status to answer with."""

    status_code = 500

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class Unauthenticated(RoleUpdateError):
    """Missing or invalid credential."""

    status_code = 401


class Forbidden(RoleUpdateError):
    """Authenticated, but not an admin."""

    status_code = 403


class InvalidRequest(RoleUpdateError):
    """Malformed or policy-blocked input (missing fields, unknown role, self-modification)."""

    status_code = 400


class NotFound(RoleUpdateError):
    status_code = 404


class InternalError(RoleUpdateError):
    status_code = 500


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an Authorization header value. None means no (or an empty) header was sent."""
    if authorization is None:
        return None
    value = authorization.strip()
    if not value:
        return None
    scheme, _, token = value.partition(" ")
    if scheme.lower() == "bearer":
        return token.strip()
    return value


async def update_user_role(
    db: Session,
    identity_provider: IdentityProvider,
    auth_token: str | None,
    target_user_id: str | None,
    new_role: str | None,
) -> RoleUpdateResult:
    """
    Change target_user_id's role to new_role on behalf of the admin owning auth_token.

    Checks run in a fixed order, each with its own failure: credential present,
    credential valid, caller is admin, fields present, role known, target is
    not the caller, target profile exists. The assignment is then upserted:
    updated in place when a row exists, inserted otherwise.

    Raises a RoleUpdateError subclass on any failure; unexpected errors are
    reported as InternalError("Internal server error").
    """
    try:
        return await _update_user_role(db, identity_provider, auth_token, target_user_id, new_role)
    except RoleUpdateError:
        raise
    except Exception as e:
        logger.exception("Unexpected error during role update: %s", e)
        raise InternalError("Internal server error", cause=e) from e


async def _authenticate(identity_provider: IdentityProvider, auth_token: str | None) -> AuthenticatedIdentity:
    if auth_token is None:
        logger.error("No authorization header provided")
        raise Unauthenticated("No authorization header")
    try:
        caller = await identity_provider.verify(auth_token)
    except IdentityVerificationError as e:
        logger.error("Invalid token: %s", e.message)
        raise Unauthenticated("Invalid token", cause=e) from e
    logger.info("Request from user: id=%s email=%s", caller.id, caller.email)
    return caller


async def _update_user_role(
    db: Session,
    identity_provider: IdentityProvider,
    auth_token: str | None,
    target_user_id: str | None,
    new_role: str | None,
) -> RoleUpdateResult:
    caller = await _authenticate(identity_provider, auth_token)

    if not has_role(db, caller.id, AppRole.ADMIN):
        logger.error("User is not an admin: %s", caller.id)
        raise Forbidden("Unauthorized: Admin access required")

    if not target_user_id or not new_role:
        logger.error(
            "Missing required fields: targetUserId=%r newRole=%r caller=%s",
            target_user_id,
            new_role,
            caller.id,
        )
        raise InvalidRequest(MISSING_FIELDS_MESSAGE)

    role = AppRole.parse(new_role)
    if role is None:
        logger.error("Invalid role: %r caller=%s", new_role, caller.id)
        raise InvalidRequest(INVALID_ROLE_MESSAGE)

    if target_user_id == caller.id:
        logger.error("Admin attempted to modify their own role: %s", caller.id)
        raise InvalidRequest(SELF_MODIFICATION_MESSAGE)

    profile = get_profile(db, target_user_id)
    if profile is None:
        logger.error("Target user not found: %s caller=%s", target_user_id, caller.id)
        raise NotFound("Target user not found")

    target_name = profile.name
    logger.info("Updating role for user: %s to: %s", target_name, role.value)

    existing = get_role(db, target_user_id, for_update=True)
    previous_role = AppRole(existing.role).value if existing is not None else NO_PREVIOUS_ROLE

    if existing is not None:
        try:
            update_role(db, existing, role)
        except RoleWriteError as e:
            logger.error("Error updating role for %s: %s", target_user_id, e.cause)
            raise InternalError("Failed to update role", cause=e) from e
    else:
        try:
            insert_role(db, target_user_id, role)
        except RoleWriteError as e:
            logger.error("Error inserting role for %s: %s", target_user_id, e.cause)
            raise InternalError("Failed to assign role", cause=e) from e

    _emit_audit_entry(
        target_user_id=target_user_id,
        target_user_name=target_name,
        previous_role=previous_role,
        new_role=role.value,
        caller=caller,
    )
    return RoleUpdateResult(previous_role=previous_role, new_role=role.value)


def _emit_audit_entry(
    target_user_id: str,
    target_user_name: str,
    previous_role: str,
    new_role: str,
    caller: AuthenticatedIdentity,
) -> None:
    entry = {
        "event": "role_updated",
        "targetUserId": target_user_id,
        "targetUserName": target_user_name,
        "previousRole": previous_role,
        "newRole": new_role,
        "changedBy": caller.id,
        "changedByEmail": caller.email,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    get_audit_logger().info(
        "Role updated successfully: %s",
        json.dumps(entry),
        extra={"audit": entry},
    )
