"""HTTP tests for /api/v1/auth (me, access), /api/v1/users and /api/v1/health."""

import unittest

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import get_db
from app.core.security import create_access_token
from app.main import app
from app.models import AppRole, Base, Profile, UserRole


def _make_session() -> Session:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autoflush=False)()


def _auth(user_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id, f'{user_id}@plant.test')}"}


class AuthApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db = _make_session()
        self.db.add_all(
            [
                Profile(user_id="admin-1", name="Asha Admin", email="admin@plant.test"),
                Profile(user_id="pm-1", name="Pavan Manager", email="pm@plant.test"),
                Profile(user_id="gone-1", name="Gita Gone", email="gone@plant.test", is_active=False),
                Profile(user_id="new-1", name="Nikhil New", email="new@plant.test"),
                UserRole(user_id="admin-1", role=AppRole.ADMIN),
                UserRole(user_id="pm-1", role=AppRole.PLANT_MANAGER),
                UserRole(user_id="gone-1", role=AppRole.ADMIN),
            ]
        )
        self.db.commit()

        def override_get_db():
            yield self.db

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        self.db.close()


class TestMe(AuthApiTestCase):
    def test_requires_token(self) -> None:
        response = self.client.get("/api/v1/auth/me")
        self.assertEqual(response.status_code, 401)

    def test_invalid_token(self) -> None:
        response = self.client.get("/api/v1/auth/me", headers={"Authorization": "Bearer junk"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["detail"], "Invalid or expired token")

    def test_admin_snapshot(self) -> None:
        response = self.client.get("/api/v1/auth/me", headers=_auth("admin-1"))
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["user"], {"id": "admin-1", "email": "admin-1@plant.test"})
        self.assertEqual(body["profile"]["name"], "Asha Admin")
        self.assertTrue(body["profile"]["is_active"])
        self.assertTrue(body["isAdmin"])
        self.assertFalse(body["isLoading"])

    def test_inactive_admin_is_not_admin(self) -> None:
        body = self.client.get("/api/v1/auth/me", headers=_auth("gone-1")).json()
        self.assertFalse(body["profile"]["is_active"])
        self.assertFalse(body["isAdmin"])

    def test_identity_without_profile(self) -> None:
        body = self.client.get("/api/v1/auth/me", headers=_auth("stranger")).json()
        self.assertIsNone(body["profile"])
        self.assertFalse(body["isAdmin"])


class TestAccess(AuthApiTestCase):
    def access(self, guard: str, headers: dict[str, str] | None = None) -> dict:
        response = self.client.get("/api/v1/auth/access", params={"guard": guard}, headers=headers or {})
        self.assertEqual(response.status_code, 200)
        return response.json()

    def test_anonymous(self) -> None:
        for guard in ("authenticated", "admin"):
            with self.subTest(guard=guard):
                self.assertEqual(self.access(guard), {"state": "unauthenticated", "redirectTo": "/auth"})

    def test_invalid_token_is_anonymous(self) -> None:
        body = self.access("admin", {"Authorization": "Bearer junk"})
        self.assertEqual(body["redirectTo"], "/auth")

    def test_non_admin(self) -> None:
        self.assertEqual(self.access("authenticated", _auth("pm-1")), {"state": "authorized", "redirectTo": None})
        self.assertEqual(
            self.access("admin", _auth("pm-1")),
            {"state": "authorized_non_admin", "redirectTo": "/plant-manager/dashboard"},
        )

    def test_admin(self) -> None:
        self.assertEqual(self.access("admin", _auth("admin-1"))["state"], "authorized")

    def test_inactive(self) -> None:
        body = self.access("admin", _auth("gone-1"))
        self.assertEqual(body, {"state": "inactive_profile", "redirectTo": "/auth"})

    def test_unknown_guard(self) -> None:
        response = self.client.get("/api/v1/auth/access", params={"guard": "superuser"})
        self.assertEqual(response.status_code, 422)


class TestUsers(AuthApiTestCase):
    def test_admin_lists_users_with_roles(self) -> None:
        response = self.client.get("/api/v1/users", headers=_auth("admin-1"))
        self.assertEqual(response.status_code, 200)
        users = {u["user_id"]: u for u in response.json()["users"]}
        self.assertEqual(set(users), {"admin-1", "pm-1", "gone-1", "new-1"})
        self.assertEqual(users["pm-1"]["role"], "plantManager")
        self.assertEqual(users["new-1"]["role"], "none")
        self.assertFalse(users["gone-1"]["is_active"])

    def test_non_admin_forbidden(self) -> None:
        response = self.client.get("/api/v1/users", headers=_auth("pm-1"))
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["detail"], "Admin access required")

    def test_inactive_admin_forbidden(self) -> None:
        response = self.client.get("/api/v1/users", headers=_auth("gone-1"))
        self.assertEqual(response.status_code, 403)

    def test_anonymous(self) -> None:
        self.assertEqual(self.client.get("/api/v1/users").status_code, 401)


class TestHealth(AuthApiTestCase):
    def test_health_reports_database_and_auth_mode(self) -> None:
        response = self.client.get("/api/v1/health/")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], "ok")
        self.assertEqual(body["database"], "connected")
        self.assertEqual(body["auth_verify_mode"], "local")


if __name__ == "__main__":
    unittest.main()
