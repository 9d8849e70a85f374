"""Identity provider: turn a bearer access token into a verified identity (id, email)."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx
import jwt

from app.core.config import Settings, get_settings
from app.core.security import decode_access_token
from app.schemas.auth import AuthenticatedIdentity

logger = logging.getLogger(__name__)


class IdentityVerificationError(Exception):
    """Raised when a token cannot be resolved to a valid, non-expired identity."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class IdentityProvider:
    """Base interface: verify(token) -> AuthenticatedIdentity or IdentityVerificationError."""

    async def verify(self, token: str) -> AuthenticatedIdentity:
        raise NotImplementedError


def _identity_from_claims(claims: dict[str, Any], id_key: str) -> AuthenticatedIdentity:
    user_id = claims.get(id_key)
    if not user_id or not isinstance(user_id, str):
        raise IdentityVerificationError("Token does not identify a user.")
    email = claims.get("email")
    return AuthenticatedIdentity(
        id=user_id,
        email=email if isinstance(email, str) and email else None,
    )


class LocalJwtIdentityProvider(IdentityProvider):
    """Verify the platform-issued JWT in-process with the project's JWT secret."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    async def verify(self, token: str) -> AuthenticatedIdentity:
        if not token or not token.strip():
            raise IdentityVerificationError("Empty token.")
        try:
            payload = decode_access_token(token.strip(), self._settings)
        except jwt.ExpiredSignatureError as e:
            raise IdentityVerificationError("Token has expired.", cause=e) from e
        except jwt.PyJWTError as e:
            raise IdentityVerificationError(f"Token rejected: {e}", cause=e) from e
        return _identity_from_claims(payload, "sub")


class RemoteIdentityProvider(IdentityProvider):
    """
    Ask the hosting platform's auth service who the token belongs to
    (GET {SUPABASE_URL}/auth/v1/user). Revoked sessions are caught here,
    which local verification cannot do.
    """

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not settings.SUPABASE_URL or settings.SUPABASE_SERVICE_ROLE_KEY is None:
            raise IdentityVerificationError(
                "Remote verification requires SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY."
            )
        self._url = f"{settings.SUPABASE_URL.rstrip('/')}/auth/v1/user"
        self._api_key = settings.SUPABASE_SERVICE_ROLE_KEY.get_secret_value()
        self._timeout = httpx.Timeout(settings.AUTH_REQUEST_TIMEOUT_SEC)
        self._transport = transport

    async def verify(self, token: str) -> AuthenticatedIdentity:
        if not token or not token.strip():
            raise IdentityVerificationError("Empty token.")
        headers = {
            "Authorization": f"Bearer {token.strip()}",
            "apikey": self._api_key,
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(self._url, headers=headers)
        except httpx.TimeoutException as e:
            raise IdentityVerificationError("Auth service request timed out.", cause=e) from e
        except httpx.HTTPError as e:
            raise IdentityVerificationError("Auth service is unreachable.", cause=e) from e

        if response.status_code != 200:
            logger.info("Auth service rejected token: status=%s", response.status_code)
            raise IdentityVerificationError(
                f"Auth service returned status {response.status_code}."
            )
        try:
            body = response.json()
        except json.JSONDecodeError as e:
            raise IdentityVerificationError(
                "Auth service response body is not valid JSON.", cause=e
            ) from e
        if not isinstance(body, dict):
            raise IdentityVerificationError("Auth service response is not a JSON object.")
        return _identity_from_claims(body, "id")


def build_identity_provider(settings: Settings) -> IdentityProvider:
    """Pick the verification strategy configured by AUTH_VERIFY_MODE."""
    if settings.AUTH_VERIFY_MODE == "remote":
        return RemoteIdentityProvider(settings)
    return LocalJwtIdentityProvider(settings)


def get_identity_provider() -> IdentityProvider:
    """FastAPI dependency; override in tests to inject a fake provider."""
    return build_identity_provider(get_settings())
