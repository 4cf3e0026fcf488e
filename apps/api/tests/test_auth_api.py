"""Login, current-principal and bearer rejection tests."""

from __future__ import annotations

import os
import unittest

from fastapi.testclient import TestClient

from operalog.adapters.auth import JwtTokenCodec
from operalog.core.config import get_settings
from operalog.main import create_app
from operalog.repositories.memory import InMemoryStore

SECRET = "operalog-test-secret-with-enough-length"


class _SettingsEnvCase(unittest.TestCase):
    _env_keys = (
        "OPERALOG_JWT_SECRET",
        "OPERALOG_ENVIRONMENT",
        "OPERALOG_STORAGE_BACKEND",
    )

    def setUp(self) -> None:
        self._old_env = {k: os.environ.get(k) for k in self._env_keys}
        os.environ["OPERALOG_JWT_SECRET"] = SECRET
        os.environ["OPERALOG_ENVIRONMENT"] = "test"
        os.environ["OPERALOG_STORAGE_BACKEND"] = "memory"
        get_settings.cache_clear()

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()


class LoginApiTests(_SettingsEnvCase):
    def setUp(self) -> None:
        super().setUp()
        self.store = InMemoryStore()
        self.client = TestClient(create_app(self.store))
        self.admin = self.store.add_user(email="admin@fleet.test", password="admin-pass", role="admin", name="Admin")
        self.ship = self.store.add_ship(name="Ocean Star", username="ocean", password="ship-pass", captain="Nadia")

    def test_admin_login_issues_user_token(self) -> None:
        response = self.client.post(
            "/api/auth/login/admin",
            json={"email": "admin@fleet.test", "password": "admin-pass"},
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["type"], "admin")
        self.assertEqual(body["user"]["email"], "admin@fleet.test")
        self.assertNotIn("password_hash", body["user"])
        payload = JwtTokenCodec(SECRET).verify(body["token"])
        self.assertEqual(payload.type, "user")
        self.assertEqual(payload.id, self.admin.id)
        self.assertEqual(payload.role, "admin")

    def test_ship_login_issues_ship_token_and_touches_last_login(self) -> None:
        self.assertIsNone(self.ship.last_login)

        response = self.client.post(
            "/api/auth/login/ship",
            json={"username": "ocean", "password": "ship-pass"},
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["type"], "ship")
        self.assertEqual(body["ship"]["captain"], "Nadia")
        payload = JwtTokenCodec(SECRET).verify(body["token"])
        self.assertEqual(payload.type, "ship")
        self.assertEqual(payload.username, "ocean")
        self.assertIsNotNone(self.store.ships[self.ship.id].last_login)

    def test_wrong_password_and_unknown_account_look_alike(self) -> None:
        wrong_password = self.client.post(
            "/api/auth/login/admin",
            json={"email": "admin@fleet.test", "password": "nope-nope"},
        )
        unknown = self.client.post(
            "/api/auth/login/admin",
            json={"email": "nobody@fleet.test", "password": "nope-nope"},
        )

        self.assertEqual(wrong_password.status_code, 401)
        self.assertEqual(wrong_password.json(), unknown.json())
        self.assertEqual(wrong_password.json()["code"], "INVALID_CREDENTIALS")

    def test_inactive_admin_cannot_log_in(self) -> None:
        self.store.add_user(email="retired@fleet.test", password="admin-pass", is_active=False)

        response = self.client.post(
            "/api/auth/login/admin",
            json={"email": "retired@fleet.test", "password": "admin-pass"},
        )

        self.assertEqual(response.status_code, 401)

    def test_short_password_is_a_validation_error(self) -> None:
        response = self.client.post("/api/auth/login/ship", json={"username": "ocean", "password": "abc"})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["code"], "VALIDATION_ERROR")

    def test_logout_is_stateless(self) -> None:
        response = self.client.post("/api/auth/logout")

        self.assertEqual(response.status_code, 200)


class CurrentPrincipalApiTests(_SettingsEnvCase):
    def setUp(self) -> None:
        super().setUp()
        self.store = InMemoryStore()
        self.client = TestClient(create_app(self.store))
        self.codec = JwtTokenCodec(SECRET)
        self.admin = self.store.add_user(email="admin@fleet.test", password="admin-pass", role="admin")
        self.ship = self.store.add_ship(name="Ocean Star", username="ocean")

    def _headers(self, token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}

    def test_me_for_user_and_ship(self) -> None:
        user_token = self.codec.issue({"id": self.admin.id, "type": "user"})
        ship_token = self.codec.issue({"id": self.ship.id, "type": "ship"})

        as_user = self.client.get("/api/auth/me", headers=self._headers(user_token))
        as_ship = self.client.get("/api/auth/me", headers=self._headers(ship_token))

        self.assertEqual(as_user.status_code, 200)
        self.assertEqual(as_user.json()["type"], "admin")
        self.assertEqual(as_user.json()["user"]["id"], self.admin.id)
        self.assertNotIn("ship", as_user.json())
        self.assertEqual(as_ship.status_code, 200)
        self.assertEqual(as_ship.json()["type"], "ship")
        self.assertEqual(as_ship.json()["ship"]["username"], "ocean")

    def test_missing_and_malformed_authorization_are_unauthorized(self) -> None:
        for headers in ({}, {"Authorization": "Token abc"}, {"Authorization": "Bearer not-a-jwt"}):
            with self.subTest(headers=headers):
                response = self.client.get("/api/auth/me", headers=headers)
                self.assertEqual(response.status_code, 401)
                self.assertEqual(response.json()["code"], "UNAUTHORIZED")

    def test_ship_token_on_user_only_route_is_unauthorized(self) -> None:
        token = self.codec.issue({"id": self.ship.id, "type": "ship"})

        response = self.client.get("/api/ships", headers=self._headers(token))

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Invalid token type")

    def test_user_token_on_ship_only_route_is_unauthorized(self) -> None:
        token = self.codec.issue({"id": self.admin.id, "type": "user"})

        response = self.client.get("/api/ships/me/profile", headers=self._headers(token))

        self.assertEqual(response.status_code, 401)

    def test_rejection_never_reveals_expiry_or_inactivity(self) -> None:
        inactive = self.store.add_user(email="gone@fleet.test", password="admin-pass", is_active=False)
        inactive_token = self.codec.issue({"id": inactive.id, "type": "user"})
        unknown_token = self.codec.issue({"id": 9999, "type": "user"})

        inactive_response = self.client.get("/api/auth/me", headers=self._headers(inactive_token))
        unknown_response = self.client.get("/api/auth/me", headers=self._headers(unknown_token))

        self.assertEqual(inactive_response.status_code, 401)
        self.assertEqual(inactive_response.json(), unknown_response.json())

    def test_deleted_ship_token_stops_working_immediately(self) -> None:
        token = self.codec.issue({"id": self.ship.id, "type": "ship"})
        self.assertEqual(self.client.get("/api/auth/me", headers=self._headers(token)).status_code, 200)

        del self.store.ships[self.ship.id]
        response = self.client.get("/api/auth/me", headers=self._headers(token))

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Ship not found")
