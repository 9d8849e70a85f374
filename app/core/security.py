"""Access-token creation and verification (platform-compatible JWTs)."""

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import jwt

from app.core.config import settings

if TYPE_CHECKING:
    from app.core.config import Settings

# Claims the platform's auth service puts on every user access token.
AUTHENTICATED_ROLE_CLAIM = "authenticated"


def create_access_token(
    sub: str,
    email: str | None = None,
    expires_in: timedelta | None = None,
    config: "Settings | None" = None,
) -> str:
    """Create an access token with the same claim shape the hosted auth service issues."""
    cfg = config or settings
    now = datetime.now(UTC)
    expire = now + (expires_in if expires_in is not None else timedelta(minutes=cfg.JWT_EXPIRE_MINUTES))
    payload: dict[str, Any] = {
        "sub": str(sub),
        "aud": cfg.JWT_AUDIENCE,
        "role": AUTHENTICATED_ROLE_CLAIM,
        "exp": expire,
        "iat": now,
    }
    if email:
        payload["email"] = email
    return jwt.encode(
        payload,
        cfg.SUPABASE_JWT_SECRET.get_secret_value(),
        algorithm=cfg.JWT_ALGORITHM,
    )


def decode_access_token(token: str, config: "Settings | None" = None) -> dict[str, Any]:
    """
    Decode and validate an access token; return its payload (sub, email, exp, ...).
    Raises jwt.PyJWTError on bad signature, wrong audience or expired token.
    """
    cfg = config or settings
    return jwt.decode(
        token,
        cfg.SUPABASE_JWT_SECRET.get_secret_value(),
        algorithms=[cfg.JWT_ALGORITHM],
        audience=cfg.JWT_AUDIENCE,
        options={"require": ["exp", "sub"]},
    )
