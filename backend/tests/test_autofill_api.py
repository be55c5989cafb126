"""HTTP tests for the autofill routes."""

from __future__ import annotations

import unittest
from unittest import mock

from fastapi.testclient import TestClient

from app.auth import Authenticator
from app.config import Settings
from app.db.session import build_engine, build_session_factory
from app.main import create_app
from app.models.base import Base
from app.services.errors import MappingStoreError
from app.services.mapping_store import MappingStore

_SECRET = "test-secret"


def _settings(**overrides: object) -> Settings:
    values = {
        "database_url": "sqlite+pysqlite:///:memory:",
        "jwt_secret": _SECRET,
        "autofill_enabled": True,
        "debug": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


class AutofillApiTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = build_engine("sqlite+pysqlite:///:memory:")
        Base.metadata.create_all(self.engine)
        self.store = MappingStore(build_session_factory(self.engine))
        self.client = TestClient(create_app(_settings(), mapping_store=self.store))
        authenticator = Authenticator(_SECRET)
        self.u1 = {"Authorization": f"Bearer {authenticator.issue_token('u1')}"}
        self.u2 = {"Authorization": f"Bearer {authenticator.issue_token('u2')}"}

    def tearDown(self) -> None:
        self.client.close()
        self.engine.dispose()

    def test_save_then_resave_returns_same_mapping(self) -> None:
        response = self.client.post(
            "/autofill/mappings",
            json={"domain": "example.edu", "selector": "#ssn", "profileField": "socialSecurityNumber"},
            headers=self.u1,
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["success"])
        mapping = body["mapping"]
        self.assertEqual(mapping["domain"], "example.edu")
        self.assertEqual(mapping["selector"], "#ssn")
        self.assertEqual(mapping["profileField"], "socialSecurityNumber")
        self.assertEqual(mapping["userId"], "u1")
        self.assertIsNone(mapping["domId"])

        again = self.client.post(
            "/autofill/mappings",
            json={"domain": "example.edu", "selector": "#ssn", "profileField": "nationalId", "domId": "ssn"},
            headers=self.u1,
        ).json()
        self.assertEqual(again["mapping"]["id"], mapping["id"])
        self.assertEqual(again["mapping"]["profileField"], "nationalId")
        self.assertEqual(again["mapping"]["domId"], "ssn")

        listed = self.client.get("/autofill/mappings", params={"domain": "example.edu"}, headers=self.u1)
        self.assertEqual(listed.status_code, 200)
        self.assertEqual([row["profileField"] for row in listed.json()["data"]], ["nationalId"])

    def test_missing_domain_is_rejected_without_write(self) -> None:
        with mock.patch.object(self.store, "upsert", wraps=self.store.upsert) as upsert:
            response = self.client.post(
                "/autofill/mappings",
                json={"selector": "#ssn", "profileField": "socialSecurityNumber"},
                headers=self.u1,
            )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json(),
            {"error": "domain, selector and profileField required", "code": "validation_error"},
        )
        upsert.assert_not_called()
        self.assertEqual(self.store.find_by_user_and_domain("u1", "example.edu"), [])

    def test_malformed_body_is_a_validation_error(self) -> None:
        malformed = (b"", b"not json", b"\xff", b"[1, 2]", b'{"domain": 5, "selector": "#a", "profileField": "b"}')
        for content in malformed:
            with self.subTest(content=content):
                response = self.client.post(
                    "/autofill/mappings",
                    content=content,
                    headers={**self.u1, "Content-Type": "application/json"},
                )
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json()["code"], "validation_error")
                self.assertNotIn("details", response.json())

    def test_unauthenticated_save_never_reaches_store(self) -> None:
        bad_token = Authenticator("another-secret").issue_token("u1")
        with mock.patch.object(self.store, "upsert", wraps=self.store.upsert) as upsert:
            for headers in ({}, {"Authorization": "Basic abc"}, {"Authorization": f"Bearer {bad_token}"}):
                with self.subTest(headers=headers):
                    response = self.client.post(
                        "/autofill/mappings",
                        json={"selector": "#ssn"},
                        headers=headers,
                    )
                    self.assertEqual(response.status_code, 401)
                    self.assertEqual(response.json(), {"error": "Unauthorized", "code": "unauthorized"})
        upsert.assert_not_called()

    def test_mappings_are_isolated_per_user(self) -> None:
        payload = {"domain": "example.edu", "selector": "#ssn"}
        mine = self.client.post("/autofill/mappings", json={**payload, "profileField": "a"}, headers=self.u1).json()
        theirs = self.client.post("/autofill/mappings", json={**payload, "profileField": "b"}, headers=self.u2).json()

        self.assertNotEqual(mine["mapping"]["id"], theirs["mapping"]["id"])
        listed = self.client.get("/autofill/mappings", params={"domain": "example.edu"}, headers=self.u1).json()
        self.assertEqual([row["profileField"] for row in listed["data"]], ["a"])

    def test_list_requires_domain(self) -> None:
        response = self.client.get("/autofill/mappings", headers=self.u1)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "domain required")

    def test_detect_is_best_effort_and_anonymous(self) -> None:
        self.assertEqual(self.client.post("/autofill/detect-fields").json(), {"data": []})
        self.assertEqual(self.client.post("/autofill/detect-fields", json={}).json(), {"data": []})
        self.assertEqual(
            self.client.post("/autofill/detect-fields", json={"fields": "nope"}).json(),
            {"data": []},
        )

        response = self.client.post(
            "/autofill/detect-fields",
            json={"fields": [{"id": "b", "label": "Email", "type": "email"}, {"id": "a"}]},
        )
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]
        self.assertEqual([field["id"] for field in data], ["b", "a"])
        self.assertEqual(data[0]["selector"], "#b")
        self.assertIsNone(data[0]["suggestedProfileField"])
        self.assertEqual(data[0]["hint"], "email")

    def test_detect_suggests_saved_mapping_for_identified_user(self) -> None:
        self.client.post(
            "/autofill/mappings",
            json={"domain": "example.edu", "selector": "#ssn", "profileField": "socialSecurityNumber"},
            headers=self.u1,
        )
        scan = {"domain": "example.edu", "fields": [{"id": "ssn"}]}

        own = self.client.post("/autofill/detect-fields", json=scan, headers=self.u1).json()["data"]
        other = self.client.post("/autofill/detect-fields", json=scan, headers=self.u2).json()["data"]
        anonymous = self.client.post("/autofill/detect-fields", json=scan).json()["data"]

        self.assertEqual(own[0]["suggestedProfileField"], "socialSecurityNumber")
        self.assertIsNone(other[0]["suggestedProfileField"])
        self.assertIsNone(anonymous[0]["suggestedProfileField"])

    def test_mapping_ui_is_served(self) -> None:
        response = self.client.get("/autofill/mapping-ui")
        self.assertEqual(response.status_code, 200)
        self.assertIn("text/html", response.headers["content-type"])
        self.assertIn("Field mappings", response.text)

    def test_health(self) -> None:
        self.assertEqual(self.client.get("/health").json(), {"status": "ok"})


class AutofillApiConfigurationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.headers = {"Authorization": f"Bearer {Authenticator(_SECRET).issue_token('u1')}"}
        self.payload = {"domain": "example.edu", "selector": "#ssn", "profileField": "nationalId"}

    def _client(self, store: MappingStore, raise_server_exceptions: bool = True, **overrides: object) -> TestClient:
        client = TestClient(
            create_app(_settings(**overrides), mapping_store=store),
            raise_server_exceptions=raise_server_exceptions,
        )
        self.addCleanup(client.close)
        return client

    def test_disabled_autofill_rejects_detection(self) -> None:
        client = self._client(mock.Mock(spec=MappingStore), autofill_enabled=False)
        response = client.post("/autofill/detect-fields", json={"fields": [{"id": "a"}]})
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json(), {"error": "Autofill disabled", "code": "autofill_disabled"})

    def test_store_failure_is_an_internal_error_without_details(self) -> None:
        store = mock.Mock(spec=MappingStore)
        store.upsert.side_effect = MappingStoreError(details="connection refused")
        response = self._client(store).post("/autofill/mappings", json=self.payload, headers=self.headers)

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Server error", "code": "store_error"})
        store.upsert.assert_called_once()

    def test_debug_mode_appends_details(self) -> None:
        store = mock.Mock(spec=MappingStore)
        store.upsert.side_effect = MappingStoreError(details="connection refused")
        response = self._client(store, debug=True).post("/autofill/mappings", json=self.payload, headers=self.headers)

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["details"], "connection refused")

    def test_unexpected_error_uses_structured_body(self) -> None:
        store = mock.Mock(spec=MappingStore)
        store.upsert.side_effect = RuntimeError("boom")

        quiet = self._client(store, raise_server_exceptions=False)
        response = quiet.post("/autofill/mappings", json=self.payload, headers=self.headers)
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Server error", "code": "internal_error"})

        debug = self._client(store, raise_server_exceptions=False, debug=True)
        response = debug.post("/autofill/mappings", json=self.payload, headers=self.headers)
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.headers["content-type"], "application/json")
        body = response.json()
        self.assertEqual((body["error"], body["code"]), ("Server error", "internal_error"))
        self.assertIn("boom", body["details"])

    def test_cors_preflight_for_extension(self) -> None:
        client = self._client(mock.Mock(spec=MappingStore))
        response = client.options(
            "/autofill/detect-fields",
            headers={
                "Origin": "chrome-extension://abcdef",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers["access-control-allow-origin"], "*")


if __name__ == "__main__":
    unittest.main()
