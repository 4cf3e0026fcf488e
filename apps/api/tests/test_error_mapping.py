from __future__ import annotations

import os
import unittest

from fastapi.testclient import TestClient

from operalog.adapters.auth import JwtTokenCodec
from operalog.adapters.db.base import DatastoreError
from operalog.core.config import get_settings
from operalog.main import create_app, datastore_error_response
from operalog.repositories.memory import InMemoryStore

SECRET = "operalog-test-secret-with-enough-length"


class DatastoreErrorMappingTests(unittest.TestCase):
    def test_constraint_violations_are_client_errors(self) -> None:
        cases = {
            "23505": "UNIQUE_VIOLATION",
            "23503": "FOREIGN_KEY_VIOLATION",
            "23514": "CHECK_VIOLATION",
        }
        for sqlstate, code in cases.items():
            with self.subTest(sqlstate=sqlstate):
                status_code, payload = datastore_error_response(DatastoreError("boom", sqlstate=sqlstate))
                self.assertEqual(status_code, 400)
                self.assertEqual(payload.code, code)
                self.assertIsNone(payload.details)

    def test_connection_failures_are_unavailable(self) -> None:
        for exc in (
            DatastoreError("refused", connection_failed=True),
            DatastoreError("admin shutdown", sqlstate="08006"),
        ):
            with self.subTest(exc=str(exc)):
                status_code, payload = datastore_error_response(exc)
                self.assertEqual(status_code, 503)
                self.assertEqual(payload.code, "DATABASE_UNAVAILABLE")

    def test_unknown_failures_are_internal(self) -> None:
        status_code, payload = datastore_error_response(DatastoreError("syntax", sqlstate="42601"))

        self.assertEqual(status_code, 500)
        self.assertEqual(payload.code, "INTERNAL_ERROR")

    def test_details_only_when_exposed(self) -> None:
        _, payload = datastore_error_response(DatastoreError("relation missing"), expose_details=True)

        self.assertEqual(payload.details, {"error": "relation missing"})


class UnavailableDatastoreApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self._old_env = {k: os.environ.get(k) for k in ("OPERALOG_JWT_SECRET", "OPERALOG_ENVIRONMENT")}
        os.environ["OPERALOG_JWT_SECRET"] = SECRET
        os.environ["OPERALOG_ENVIRONMENT"] = "production"
        get_settings.cache_clear()

        self.store = InMemoryStore()
        self.ship = self.store.add_ship(name="Ocean Star", username="ocean")
        self.client = TestClient(create_app(self.store))
        token = JwtTokenCodec(SECRET).issue({"id": self.ship.id, "type": "ship"})
        self.headers = {"Authorization": f"Bearer {token}"}

    def tearDown(self) -> None:
        for key, value in self._old_env.items():
            if value is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = value
        get_settings.cache_clear()

    def test_health_reports_disconnected_database(self) -> None:
        healthy = self.client.get("/api/health")
        self.store.available = False
        degraded = self.client.get("/api/health")

        self.assertEqual(healthy.status_code, 200)
        self.assertEqual(healthy.json()["database"], "Connected")
        self.assertEqual(degraded.status_code, 503)
        self.assertEqual(degraded.json()["status"], "ERROR")
        self.assertEqual(degraded.json()["environment"], "production")

    def test_principal_lookup_failure_is_unavailable_not_unauthorized(self) -> None:
        self.store.available = False

        response = self.client.get("/api/auth/me", headers=self.headers)

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["code"], "DATABASE_UNAVAILABLE")
        self.assertNotIn("details", response.json())

    def test_unknown_route_uses_error_envelope(self) -> None:
        response = self.client.get("/api/nowhere")

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["code"], "ROUTE_NOT_FOUND")
