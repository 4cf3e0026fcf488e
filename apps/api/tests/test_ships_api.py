"""Ship management role and partial update tests."""

from __future__ import annotations

import os
import unittest

from fastapi.testclient import TestClient

from operalog.adapters.auth import JwtTokenCodec
from operalog.core.config import get_settings
from operalog.core.passwords import verify_password
from operalog.main import create_app
from operalog.repositories.memory import InMemoryStore

SECRET = "operalog-test-secret-with-enough-length"


class _SettingsEnvCase(unittest.TestCase):
    _env_keys = (
        "OPERALOG_JWT_SECRET",
        "OPERALOG_ENVIRONMENT",
    )

    def setUp(self) -> None:
        self._old_env = {k: os.environ.get(k) for k in self._env_keys}
        os.environ["OPERALOG_JWT_SECRET"] = SECRET
        os.environ["OPERALOG_ENVIRONMENT"] = "test"
        get_settings.cache_clear()

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()


class ShipApiTests(_SettingsEnvCase):
    def setUp(self) -> None:
        super().setUp()
        self.store = InMemoryStore()
        self.client = TestClient(create_app(self.store))
        codec = JwtTokenCodec(SECRET)
        admin = self.store.add_user(email="admin@fleet.test", password="admin-pass", role="admin")
        supervisor = self.store.add_user(email="sup@fleet.test", password="sup-pass", role="supervisor")
        viewer = self.store.add_user(email="viewer@fleet.test", password="viewer-pass", role="viewer")
        self.ship = self.store.add_ship(name="Ocean Star", username="ocean", captain="Nadia", crew=12)
        self.admin_headers = {"Authorization": f"Bearer {codec.issue({'id': admin.id, 'type': 'user'})}"}
        self.supervisor_headers = {"Authorization": f"Bearer {codec.issue({'id': supervisor.id, 'type': 'user'})}"}
        self.viewer_headers = {"Authorization": f"Bearer {codec.issue({'id': viewer.id, 'type': 'user'})}"}
        self.ship_headers = {"Authorization": f"Bearer {codec.issue({'id': self.ship.id, 'type': 'ship'})}"}

    def _new_ship(self, **overrides: object) -> dict:
        body = {
            "name": "Sea Falcon",
            "type": "TUG",
            "captain": "Marc",
            "username": "falcon",
            "password": "falcon-pass",
        }
        body.update(overrides)
        return body

    def test_admin_creates_ship_with_hashed_password(self) -> None:
        response = self.client.post("/api/ships", headers=self.admin_headers, json=self._new_ship())

        self.assertEqual(response.status_code, 201)
        created = response.json()
        self.assertEqual(created["username"], "falcon")
        self.assertNotIn("password", created)
        stored = self.store.ships[created["id"]]
        self.assertNotEqual(stored.password_hash, "falcon-pass")
        self.assertTrue(verify_password("falcon-pass", stored.password_hash))

    def test_create_requires_admin_role(self) -> None:
        response = self.client.post("/api/ships", headers=self.supervisor_headers, json=self._new_ship())

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["code"], "FORBIDDEN")
        self.assertEqual(self.store.ship_write_count, 0)

    def test_create_with_ship_token_is_unauthenticated(self) -> None:
        response = self.client.post("/api/ships", headers=self.ship_headers, json=self._new_ship())

        self.assertEqual(response.status_code, 401)

    def test_duplicate_username_maps_to_unique_violation(self) -> None:
        response = self.client.post("/api/ships", headers=self.admin_headers, json=self._new_ship(username="ocean"))

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["code"], "UNIQUE_VIOLATION")

    def test_duplicate_name_maps_to_unique_violation(self) -> None:
        created = self.client.post(
            "/api/ships",
            headers=self.admin_headers,
            json=self._new_ship(name="Ocean Star", username="other"),
        )
        renamed = self.store.add_ship(name="Sea Falcon", username="falcon")
        clash = self.client.put(
            f"/api/ships/{renamed.id}",
            headers=self.admin_headers,
            json={"name": "Ocean Star"},
        )

        self.assertEqual(created.status_code, 400)
        self.assertEqual(created.json()["code"], "UNIQUE_VIOLATION")
        self.assertEqual(clash.status_code, 400)
        self.assertEqual(self.store.ships[renamed.id].name, "Sea Falcon")

    def test_update_keeps_own_name(self) -> None:
        response = self.client.put(
            f"/api/ships/{self.ship.id}",
            headers=self.admin_headers,
            json={"name": "Ocean Star", "crew": 14},
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["crew"], 14)

    def test_update_missing_ship_is_not_found_even_without_fields(self) -> None:
        response = self.client.put("/api/ships/999", headers=self.admin_headers, json={})

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["code"], "RESOURCE_NOT_FOUND")

    def test_supervisor_updates_only_supplied_fields(self) -> None:
        response = self.client.put(
            f"/api/ships/{self.ship.id}",
            headers=self.supervisor_headers,
            json={"status": "AT_SEA", "captain": None},
        )

        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], "AT_SEA")
        self.assertEqual(body["captain"], "Nadia")
        self.assertEqual(body["crew"], 12)

    def test_update_rehashes_password(self) -> None:
        response = self.client.put(
            f"/api/ships/{self.ship.id}",
            headers=self.admin_headers,
            json={"password": "rotated-pass"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertTrue(verify_password("rotated-pass", self.store.ships[self.ship.id].password_hash))

    def test_update_without_fields_is_rejected(self) -> None:
        response = self.client.put(f"/api/ships/{self.ship.id}", headers=self.admin_headers, json={})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["code"], "NO_FIELDS_TO_UPDATE")
        self.assertEqual(self.store.ship_write_count, 0)

    def test_update_denied_for_other_roles(self) -> None:
        response = self.client.put(f"/api/ships/{self.ship.id}", headers=self.viewer_headers, json={"status": "X"})

        self.assertEqual(response.status_code, 403)

    def test_update_unknown_ship_is_not_found(self) -> None:
        response = self.client.put("/api/ships/999", headers=self.admin_headers, json={"status": "X"})

        self.assertEqual(response.status_code, 404)

    def test_delete_requires_admin_and_removes_ship(self) -> None:
        denied = self.client.delete(f"/api/ships/{self.ship.id}", headers=self.supervisor_headers)
        self.assertEqual(denied.status_code, 403)

        deleted = self.client.delete(f"/api/ships/{self.ship.id}", headers=self.admin_headers)
        self.assertEqual(deleted.status_code, 204)
        self.assertNotIn(self.ship.id, self.store.ships)

        again = self.client.delete(f"/api/ships/{self.ship.id}", headers=self.admin_headers)
        self.assertEqual(again.status_code, 404)

    def test_list_and_get_for_any_user(self) -> None:
        self.store.add_ship(name="Sea Falcon", username="falcon")

        listing = self.client.get("/api/ships?limit=1", headers=self.viewer_headers)
        single = self.client.get(f"/api/ships/{self.ship.id}", headers=self.viewer_headers)

        self.assertEqual(listing.status_code, 200)
        self.assertEqual(len(listing.json()["items"]), 1)
        self.assertEqual(listing.json()["pagination"], {"page": 1, "limit": 1, "total": 2, "pages": 2})
        self.assertEqual(single.json()["name"], "Ocean Star")

    def test_ship_reads_own_profile(self) -> None:
        response = self.client.get("/api/ships/me/profile", headers=self.ship_headers)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["id"], self.ship.id)
        self.assertEqual(response.json()["crew"], 12)
