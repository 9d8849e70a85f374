"""
Route guards: decide whether a page renders, waits, or redirects.

Guards are stateless; every evaluation is recomputed from the snapshot passed in.
"""

from app.schemas.auth import AuthorizationSnapshot, GuardDecision, GuardKind

SIGN_IN_PATH = "/auth"
NON_ADMIN_LANDING_PATH = "/plant-manager/dashboard"


class RouteGuard:
    """Base guard: resolves the states every guard shares."""

    sign_in_path = SIGN_IN_PATH

    def evaluate(self, snapshot: AuthorizationSnapshot) -> GuardDecision:
        if snapshot.is_loading:
            return GuardDecision(state="loading")
        if snapshot.user is None or snapshot.profile is None:
            return GuardDecision(state="unauthenticated", redirect_to=self.sign_in_path)
        # Inactive accounts are sent to the same place as anonymous ones.
        if not snapshot.profile.is_active:
            return GuardDecision(state="inactive_profile", redirect_to=self.sign_in_path)
        return self.authorize(snapshot)

    def authorize(self, snapshot: AuthorizationSnapshot) -> GuardDecision:
        """Hook for guard-specific checks on an authenticated, active session."""
        return GuardDecision(state="authorized")


class AuthenticatedGuard(RouteGuard):
    """Any signed-in user with an active profile."""


class AdminGuard(RouteGuard):
    """Signed-in, active and admin. Non-admins go to their landing page, not to sign-in."""

    non_admin_path = NON_ADMIN_LANDING_PATH

    def authorize(self, snapshot: AuthorizationSnapshot) -> GuardDecision:
        if not snapshot.is_admin:
            return GuardDecision(state="authorized_non_admin", redirect_to=self.non_admin_path)
        return GuardDecision(state="authorized")


GUARDS: dict[GuardKind, RouteGuard] = {
    "authenticated": AuthenticatedGuard(),
    "admin": AdminGuard(),
}


def get_guard(kind: GuardKind) -> RouteGuard:
    return GUARDS[kind]
