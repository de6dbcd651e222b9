"""
Tests for the multipart submission client against a mocked endpoint.
"""

from __future__ import annotations

import asyncio

import httpx

from contact_wizard.application.dto.inquiry_payload import InquiryPayload
from contact_wizard.application.exceptions import ServerValidationError, TransportError
from contact_wizard.domain.entities.attachment import Attachment
from contact_wizard.infrastructure.submission.http_client import HttpSubmissionClient


ENDPOINT = "https://inquiries.example.com/contact"


def _payload(with_file: bool = True) -> InquiryPayload:
    attachments = []
    if with_file:
        attachments.append(
            Attachment(name="plan.pdf", byte_size=300, mime_type="application/pdf", extension="pdf", content=b"p" * 300)
        )
    return InquiryPayload(
        name="Ana Ruiz",
        email="ana@example.com",
        preferred_contact="Email",
        message="We want to renovate a 90 m2 flat.",
        privacy_accepted=True,
        submission_token="tok-1",
        attachments=attachments,
    )


def _submit(handler, payload: InquiryPayload | None = None):
    client = HttpSubmissionClient(endpoint=ENDPOINT, transport=httpx.MockTransport(handler))
    return asyncio.run(client.submit(payload or _payload()))


def _expect(error_type, handler):
    try:
        _submit(handler)
    except error_type as e:
        return e
    raise AssertionError(f"{error_type.__name__} not raised")


def test_multipart_request_shape():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["content_type"] = request.headers["content-type"]
        seen["body"] = request.content
        return httpx.Response(200, json={"success": True, "message": "ok"})

    response = _submit(handler)

    assert response.success
    assert seen["method"] == "POST"
    assert seen["url"] == ENDPOINT
    assert seen["content_type"].startswith("multipart/form-data")
    assert b'name="submission_token"' in seen["body"]
    assert b"tok-1" in seen["body"]
    assert b'name="privacy_accepted"\r\n\r\ntrue' in seen["body"]
    assert b'name="attachments[]"; filename="plan.pdf"' in seen["body"]


def test_multipart_fields():
    data, files = _payload().to_multipart()
    assert data["preferred_contact"] == "Email"
    assert data["privacy_accepted"] == "true"
    assert "attachments" not in data
    assert files == [("attachments[]", ("plan.pdf", b"p" * 300, "application/pdf"))]


def test_field_errors_raise_server_validation_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(422, json={"success": False, "errors": {"email": ["Blocked domain.", "Other"]}})

    error = _expect(ServerValidationError, handler)
    assert error.field_errors == {"email": "Blocked domain."}


def test_errors_in_success_status_are_field_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"success": False, "errors": {"submission_token": "Expired."}})

    error = _expect(ServerValidationError, handler)
    assert error.field_errors == {"submission_token": "Expired."}


def test_server_error_is_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    _expect(TransportError, handler)


def test_network_failure_is_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    _expect(TransportError, handler)


def test_unconfirmed_response_is_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"success": False, "message": "try later"})

    error = _expect(TransportError, handler)
    assert "try later" in str(error)


def test_plain_success_page_is_accepted():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>Thanks</html>", headers={"content-type": "text/html"})

    assert _submit(handler, _payload(with_file=False)).success
