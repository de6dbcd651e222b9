from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError as PydanticValidationError

from contact_wizard.application.dto.inquiry_payload import InquiryPayload
from contact_wizard.application.dto.submission_response import SubmissionResponse
from contact_wizard.application.exceptions import ServerValidationError, TransportError
from contact_wizard.application.ports.submission import SubmissionPort


class HttpSubmissionClient(SubmissionPort):
    def __init__(self, endpoint: str, timeout: float = 15.0, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._endpoint = endpoint
        self._timeout = timeout
        self._transport = transport
        self._logger = logging.getLogger(__name__)

    async def submit(self, payload: InquiryPayload) -> SubmissionResponse:
        data, files = payload.to_multipart()
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.post(
                    self._endpoint,
                    data=data,
                    files=files or None,
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as e:
            raise TransportError(f"{type(e).__name__}: {e}") from e

        if resp.status_code == 422:
            try:
                body = SubmissionResponse.model_validate(resp.json())
            except (ValueError, PydanticValidationError) as e:
                raise TransportError("Unreadable validation response") from e
            if not body.errors:
                raise TransportError("Validation response without field errors")
            raise ServerValidationError(body.errors)

        if resp.status_code >= 400:
            self._logger.error(
                "Inquiry endpoint error",
                extra={"status": resp.status_code, "attachment_count": len(payload.attachments)},
            )
            raise TransportError(f"Unexpected status {resp.status_code}")

        try:
            if "application/json" in resp.headers.get("content-type", ""):
                body = SubmissionResponse.model_validate(resp.json())
            else:
                # Redirect-style endpoints answer a plain 2xx page on success.
                body = SubmissionResponse()
        except (ValueError, PydanticValidationError) as e:
            raise TransportError("Unreadable success response") from e

        if body.errors:
            raise ServerValidationError(body.errors)
        if not body.success:
            raise TransportError(body.message or "Endpoint did not confirm the inquiry")
        return body
