"""Unit tests for app.services.route_guards: every guard state and redirect target."""

import unittest

from app.schemas.auth import AuthenticatedIdentity, AuthorizationSnapshot, ProfileOut
from app.services.route_guards import AdminGuard, AuthenticatedGuard, get_guard

USER = AuthenticatedIdentity(id="u1", email="u1@plant.test")


def _profile(is_active: bool = True) -> ProfileOut:
    return ProfileOut(id="p1", user_id="u1", name="Uma Worker", email="u1@plant.test", is_active=is_active)


def _snapshot(**kwargs: object) -> AuthorizationSnapshot:
    return AuthorizationSnapshot(**kwargs)


class TestAuthenticatedGuard(unittest.TestCase):
    guard = AuthenticatedGuard()

    def test_loading_waits_without_redirect(self) -> None:
        decision = self.guard.evaluate(_snapshot(is_loading=True))
        self.assertEqual(decision.state, "loading")
        self.assertIsNone(decision.redirect_to)
        self.assertTrue(decision.is_pending)
        self.assertFalse(decision.renders)

    def test_loading_wins_even_with_user(self) -> None:
        decision = self.guard.evaluate(_snapshot(user=USER, profile=_profile(), is_loading=True))
        self.assertEqual(decision.state, "loading")

    def test_no_user_redirects_to_sign_in(self) -> None:
        decision = self.guard.evaluate(_snapshot(user=None, is_loading=False))
        self.assertEqual(decision.state, "unauthenticated")
        self.assertEqual(decision.redirect_to, "/auth")

    def test_user_without_profile_redirects_to_sign_in(self) -> None:
        decision = self.guard.evaluate(_snapshot(user=USER, profile=None))
        self.assertEqual(decision.state, "unauthenticated")
        self.assertEqual(decision.redirect_to, "/auth")

    def test_inactive_profile_redirects_to_sign_in_even_for_admin(self) -> None:
        decision = self.guard.evaluate(_snapshot(user=USER, profile=_profile(is_active=False), is_admin=True))
        self.assertEqual(decision.state, "inactive_profile")
        self.assertEqual(decision.redirect_to, "/auth")

    def test_active_non_admin_renders(self) -> None:
        decision = self.guard.evaluate(_snapshot(user=USER, profile=_profile(), is_admin=False))
        self.assertEqual(decision.state, "authorized")
        self.assertIsNone(decision.redirect_to)
        self.assertTrue(decision.renders)


class TestAdminGuard(unittest.TestCase):
    guard = AdminGuard()

    def test_no_user_redirects_to_sign_in_before_admin_check(self) -> None:
        decision = self.guard.evaluate(_snapshot(user=None, is_loading=False))
        self.assertEqual(decision.state, "unauthenticated")
        self.assertEqual(decision.redirect_to, "/auth")

    def test_inactive_admin_redirects_to_sign_in(self) -> None:
        decision = self.guard.evaluate(_snapshot(user=USER, profile=_profile(is_active=False), is_admin=True))
        self.assertEqual(decision.redirect_to, "/auth")

    def test_non_admin_redirects_to_landing_page(self) -> None:
        decision = self.guard.evaluate(_snapshot(user=USER, profile=_profile(), is_admin=False))
        self.assertEqual(decision.state, "authorized_non_admin")
        self.assertEqual(decision.redirect_to, "/plant-manager/dashboard")
        self.assertFalse(decision.renders)

    def test_admin_renders(self) -> None:
        decision = self.guard.evaluate(_snapshot(user=USER, profile=_profile(), is_admin=True))
        self.assertEqual(decision.state, "authorized")
        self.assertTrue(decision.renders)

    def test_loading(self) -> None:
        self.assertEqual(self.guard.evaluate(_snapshot(is_loading=True)).state, "loading")


class TestGuardRegistry(unittest.TestCase):
    def test_lookup(self) -> None:
        self.assertIsInstance(get_guard("admin"), AdminGuard)
        self.assertIsInstance(get_guard("authenticated"), AuthenticatedGuard)
        self.assertNotIsInstance(get_guard("authenticated"), AdminGuard)

    def test_decision_serializes_camel_case(self) -> None:
        decision = get_guard("admin").evaluate(_snapshot(user=USER, profile=_profile()))
        self.assertEqual(
            decision.model_dump(by_alias=True),
            {"state": "authorized_non_admin", "redirectTo": "/plant-manager/dashboard"},
        )


if __name__ == "__main__":
    unittest.main()
