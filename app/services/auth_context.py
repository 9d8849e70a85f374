"""
Authorization context: the per-session cached view of identity, profile and admin flag.

This is a library component for clients that hold a signed-in session, such
as a UI shell. The HTTP API resolves authorization per request and does not
use it.

The context is reference counted. Holders acquire it (or use it as a context
manager) and the last release drops the cache and every listener. It is
refreshed only by session-change events from the identity provider; guards
read `snapshot` and are re-run by listeners, never by polling.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Awaitable, Callable

from sqlalchemy.orm import Session

from app.schemas.auth import AuthorizationSnapshot
from app.services.authorization import resolve_authorization
from app.services.identity import IdentityProvider

logger = logging.getLogger(__name__)

Resolver = Callable[[str], Awaitable[AuthorizationSnapshot]]
Listener = Callable[[AuthorizationSnapshot], None]

LOADING = AuthorizationSnapshot(is_loading=True)
SIGNED_OUT = AuthorizationSnapshot()


class AuthorizationContext:
    """Scoped holder for the current session's AuthorizationSnapshot."""

    def __init__(self, resolver: Resolver, sign_out: Callable[[], None] | None = None) -> None:
        self._lock = threading.RLock()
        self._resolver = resolver
        self._sign_out = sign_out
        self._snapshot: AuthorizationSnapshot = LOADING
        self._listeners: list[Listener] = []
        self._refcount = 0
        # Bumped on every session change; a refresh whose generation is stale is discarded.
        self._generation = 0

    # Scope

    def acquire(self) -> AuthorizationContext:
        with self._lock:
            self._refcount += 1
            return self

    def release(self) -> None:
        with self._lock:
            if self._refcount == 0:
                raise RuntimeError("AuthorizationContext released more times than acquired")
            self._refcount -= 1
            if self._refcount == 0:
                self._listeners.clear()
                self._snapshot = LOADING
                self._generation += 1

    def __enter__(self) -> AuthorizationContext:
        return self.acquire()

    def __exit__(self, *exc_info: object) -> None:
        self.release()

    @property
    def refcount(self) -> int:
        with self._lock:
            return self._refcount

    # State

    @property
    def snapshot(self) -> AuthorizationSnapshot:
        with self._lock:
            return self._snapshot

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register listener for snapshot changes; returns a function that unsubscribes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, snapshot: AuthorizationSnapshot, generation: int) -> bool:
        with self._lock:
            if generation != self._generation:
                return False
            self._snapshot = snapshot
            listeners = list(self._listeners)
        for listener in listeners:
            listener(snapshot)
        return True

    async def handle_session_change(self, access_token: str | None) -> AuthorizationSnapshot:
        """
        Refresh after the identity provider reports a new session (or none).

        Publishes Loading first when there is a session to resolve. A refresh
        overtaken by a newer session change is dropped without publishing.
        """
        with self._lock:
            self._generation += 1
            generation = self._generation

        if not access_token:
            self._publish(SIGNED_OUT, generation)
            return self.snapshot

        self._publish(LOADING, generation)
        try:
            resolved = await self._resolver(access_token)
        except Exception as e:
            logger.error("Error resolving authorization: %s", e)
            resolved = AuthorizationSnapshot()

        if resolved.profile is not None and not resolved.profile.is_active:
            logger.info("Signing out inactive user: %s", resolved.user.id if resolved.user else None)
            if self._sign_out is not None:
                self._sign_out()
            resolved = AuthorizationSnapshot(user=resolved.user, profile=None, is_admin=False)

        self._publish(resolved.model_copy(update={"is_loading": False}), generation)
        return self.snapshot


def make_session_resolver(
    identity_provider: IdentityProvider,
    session_factory: Callable[[], Session],
) -> Resolver:
    """Resolver that verifies the token and reads profile and roles in a short-lived session."""

    async def resolve(access_token: str) -> AuthorizationSnapshot:
        identity = await identity_provider.verify(access_token)
        db = session_factory()
        try:
            return resolve_authorization(db, identity)
        finally:
            db.close()

    return resolve
