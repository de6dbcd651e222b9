"""
Tests for the inquiry HTTP endpoints.
"""

from __future__ import annotations

from fastapi.testclient import TestClient

from contact_wizard.application.use_cases.inquiry_wizard import InquiryWizard
from contact_wizard.infrastructure.bot_mitigation.mock_provider import MockBotMitigation
from contact_wizard.infrastructure.knowledge.service_catalog_store import ServiceCatalogStore
from contact_wizard.infrastructure.store.memory_store import MemoryKeyValueStore
from contact_wizard.infrastructure.submission.mock_client import MockSubmissionClient
from contact_wizard.main import app
from contact_wizard.wiring.sessions import InquirySessionRegistry, get_session_registry


def _client():
    submission = MockSubmissionClient()
    stores: dict[str, MemoryKeyValueStore] = {}

    def factory(client_id: str | None = None, session_id: str | None = None) -> InquiryWizard:
        store = stores.setdefault(client_id or session_id, MemoryKeyValueStore())
        return InquiryWizard(
            submission=submission,
            bot_mitigation=MockBotMitigation(site_key="test-key"),
            draft_store=store,
            catalog=ServiceCatalogStore(),
            session_id=session_id or "test",
        )

    registry = InquirySessionRegistry(factory=factory)
    app.dependency_overrides[get_session_registry] = lambda: registry
    return TestClient(app), registry, submission


def _create(client: TestClient, client_id: str | None = None) -> str:
    body = {"client_id": client_id} if client_id else {}
    resp = client.post("/api/v1/inquiries", json=body)
    assert resp.status_code == 201
    return resp.json()["session_id"]


def _advance_to_attachments(client: TestClient, session_id: str) -> None:
    base = f"/api/v1/inquiries/{session_id}"
    client.patch(f"{base}/fields", json={"fields": {"name": "Ana Ruiz", "email": "ana@example.com"}})
    assert client.post(f"{base}/next").json()["moved"]
    client.patch(f"{base}/fields", json={"fields": {"message": "We want to renovate a 90 m2 flat."}})
    assert client.post(f"{base}/next").json()["moved"]
    client.patch(f"{base}/fields", json={"fields": {"privacy_accepted": True}})


def test_health():
    client, _, _ = _client()
    try:
        with client:
            assert client.get("/health").json() == {"status": "ok"}
    finally:
        app.dependency_overrides.clear()


def test_create_and_read_session():
    client, registry, _ = _client()
    try:
        with client:
            session_id = _create(client)
            resp = client.get(f"/api/v1/inquiries/{session_id}")

            data = resp.json()
            assert data["step"] == 0
            assert data["step_label"] == "Contact details"
            assert data["progress"] == 25.0
            assert data["available_actions"] == ["next", "reset"]
            assert len(registry) == 1
    finally:
        app.dependency_overrides.clear()


def test_unknown_session_is_404():
    client, _, _ = _client()
    try:
        with client:
            assert client.get("/api/v1/inquiries/missing").status_code == 404
    finally:
        app.dependency_overrides.clear()


def test_rejected_next_returns_field_error():
    client, _, _ = _client()
    try:
        with client:
            session_id = _create(client)
            client.patch(f"/api/v1/inquiries/{session_id}/fields", json={"fields": {"name": "Ana"}})
            data = client.post(f"/api/v1/inquiries/{session_id}/next").json()

            assert data["moved"] is False
            assert data["errors"] == {"email": "Email is required."}
            assert data["focus_field"] == "email"
            assert data["notification"]["severity"] == "warning"
    finally:
        app.dependency_overrides.clear()


def test_unknown_field_is_400():
    client, _, _ = _client()
    try:
        with client:
            session_id = _create(client)
            resp = client.patch(f"/api/v1/inquiries/{session_id}/fields", json={"fields": {"submission_token": "x"}})
            assert resp.status_code == 400
    finally:
        app.dependency_overrides.clear()


def test_full_flow_with_attachment():
    client, _, submission = _client()
    try:
        with client:
            session_id = _create(client)
            base = f"/api/v1/inquiries/{session_id}"

            resp = client.post(f"{base}/attachments", files=[("files", ("plan.pdf", b"x" * 500, "application/pdf"))])
            assert resp.status_code == 409

            _advance_to_attachments(client, session_id)
            resp = client.post(
                f"{base}/attachments",
                files=[
                    ("files", ("plan.pdf", b"x" * 500, "application/pdf")),
                    ("files", ("script.sh", b"x" * 500, "text/x-sh")),
                ],
            )
            data = resp.json()
            assert [a["name"] for a in data["attachments"]] == ["plan.pdf"]
            assert data["rejections"][0]["reason"] == "extension_not_allowed"

            data = client.post(f"{base}/submit").json()
            assert data["outcome"]["success"] is True
            assert data["step"] == 3
            assert data["summary"]["attachment_names"] == ["plan.pdf"]
            assert data["available_actions"] == ["reset"]
            assert len(submission.sent) == 1

            resp = client.patch(f"{base}/fields", json={"fields": {"name": "Changed"}})
            assert resp.status_code == 409

            data = client.post(f"{base}/reset").json()
            assert data["step"] == 0
            assert data["form"]["name"] == ""
    finally:
        app.dependency_overrides.clear()


def test_draft_survives_a_new_session_for_the_same_client():
    client, _, _ = _client()
    try:
        with client:
            first = _create(client, client_id="browser-1")
            client.patch(f"/api/v1/inquiries/{first}/fields", json={"fields": {"name": "Ana"}})
            assert client.delete(f"/api/v1/inquiries/{first}").status_code == 204

            second = _create(client, client_id="browser-1")
            data = client.get(f"/api/v1/inquiries/{second}").json()
            assert data["form"]["name"] == "Ana"
            assert data["notification"]["severity"] == "info"
    finally:
        app.dependency_overrides.clear()


def test_estimate_endpoint():
    client, _, _ = _client()
    try:
        with client:
            session_id = _create(client)
            base = f"/api/v1/inquiries/{session_id}"
            resp = client.post(f"{base}/estimate", json={"square_meters": 5, "quality": "Standard"})
            assert resp.status_code == 400

            data = client.post(f"{base}/estimate", json={"square_meters": 20, "quality": "Standard"}).json()
            assert "Indicative estimate: 20 m2" in data["form"]["message"]
    finally:
        app.dependency_overrides.clear()


def test_consent_string_false_is_not_consent():
    client, _, _ = _client()
    try:
        with client:
            session_id = _create(client)
            base = f"/api/v1/inquiries/{session_id}/fields"

            data = client.patch(base, json={"fields": {"privacy_accepted": "false"}}).json()
            assert data["form"]["privacy_accepted"] is False

            assert client.patch(base, json={"fields": {"privacy_accepted": "no"}}).status_code == 400
    finally:
        app.dependency_overrides.clear()


def test_unknown_service_is_400():
    client, _, _ = _client()
    try:
        with client:
            session_id = _create(client)
            base = f"/api/v1/inquiries/{session_id}"

            resp = client.patch(f"{base}/fields", json={"fields": {"service": "Totally Made Up Service"}})
            assert resp.status_code == 400

            data = client.get(base).json()
            assert data["form"]["service"] == ""
            assert "Interior Design" in data["service_options"]
    finally:
        app.dependency_overrides.clear()
