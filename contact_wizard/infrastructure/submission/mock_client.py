from __future__ import annotations

import logging

from contact_wizard.application.dto.inquiry_payload import InquiryPayload
from contact_wizard.application.dto.submission_response import SubmissionResponse
from contact_wizard.application.ports.submission import SubmissionPort


class MockSubmissionClient(SubmissionPort):
    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self.sent: list[InquiryPayload] = []

    async def submit(self, payload: InquiryPayload) -> SubmissionResponse:
        self.sent.append(payload)
        self._logger.info(
            "Mock inquiry submission",
            extra={"attachment_count": len(payload.attachments), "service": payload.service},
        )
        return SubmissionResponse(success=True, message="accepted")
