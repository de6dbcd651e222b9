from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from contact_wizard.domain.entities.attachment import Attachment
from contact_wizard.domain.entities.form_state import FormState


class InquiryPayload(BaseModel):
    name: str
    email: str
    phone: str = ""
    preferred_contact: str
    contact_time: str = ""
    service: str = ""
    message: str
    privacy_accepted: bool
    submission_token: str
    attachments: list[Attachment] = Field(default_factory=list)

    @classmethod
    def from_form(cls, form: FormState) -> "InquiryPayload":
        return cls(**form.scalar_fields(), attachments=list(form.attachments))

    def to_multipart(self) -> tuple[dict[str, str], list[tuple[str, tuple[str, bytes, str]]]]:
        """Split into form fields and `attachments[]` file parts for a multipart POST."""
        data: dict[str, Any] = self.model_dump(exclude={"attachments"})
        data["privacy_accepted"] = "true" if self.privacy_accepted else "false"
        files = [
            ("attachments[]", (attachment.name, attachment.content, attachment.mime_type))
            for attachment in self.attachments
        ]
        return {key: str(value) for key, value in data.items()}, files
