from __future__ import annotations

from abc import ABC, abstractmethod

from contact_wizard.application.dto.inquiry_payload import InquiryPayload
from contact_wizard.application.dto.submission_response import SubmissionResponse


class SubmissionPort(ABC):
    @abstractmethod
    async def submit(self, payload: InquiryPayload) -> SubmissionResponse:
        """
        Transmit the inquiry as one multipart request.
        Raises ServerValidationError for field-keyed rejections and
        TransportError for anything else that is not a success.
        """
        raise NotImplementedError
