from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from contact_wizard.domain.entities.attachment import Attachment


class PreferredContact(str, Enum):
    EMAIL = "Email"
    PHONE = "Phone"
    WHATSAPP = "WhatsApp"


CONTACT_TIME_SLOTS = ("Morning (9-12)", "Afternoon (12-18)", "Any time")

# Fields the user edits directly; attachments and the token have their own setters.
EDITABLE_FIELDS = (
    "name",
    "email",
    "phone",
    "preferred_contact",
    "contact_time",
    "service",
    "message",
    "privacy_accepted",
)

# Order used to pick the field that receives focus after a rejected submission.
FOCUS_ORDER = ("name", "email", "phone", "service", "message", "privacy_accepted")

_CONSENT_STRINGS = {"true": True, "false": False}


def _parse_consent(value: Any) -> bool:
    """Only real booleans or the literal strings "true"/"false" count as an answer."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _CONSENT_STRINGS:
        return _CONSENT_STRINGS[value.strip().lower()]
    raise ValueError(f"privacy_accepted must be a boolean, got {value!r}")


@dataclass(frozen=True)
class FormState:
    name: str = ""
    email: str = ""
    phone: str = ""
    preferred_contact: PreferredContact = PreferredContact.EMAIL
    contact_time: str = ""
    service: str = ""
    message: str = ""
    attachments: tuple[Attachment, ...] = ()
    privacy_accepted: bool = False
    submission_token: str = ""

    def with_field(self, name: str, value: Any) -> "FormState":
        """Return a copy with one editable field replaced, coercing the value."""
        if name not in EDITABLE_FIELDS:
            raise ValueError(f"Unknown form field: {name}")
        if name == "preferred_contact":
            value = PreferredContact(value)
        elif name == "privacy_accepted":
            value = _parse_consent(value)
        else:
            value = "" if value is None else str(value)
        return replace(self, **{name: value})

    def with_attachments(self, attachments: tuple[Attachment, ...] | list[Attachment]) -> "FormState":
        return replace(self, attachments=tuple(attachments))

    def with_submission_token(self, token: str) -> "FormState":
        return replace(self, submission_token=token)

    @property
    def phone_required(self) -> bool:
        return self.preferred_contact in (PreferredContact.PHONE, PreferredContact.WHATSAPP)

    def scalar_fields(self) -> dict[str, Any]:
        """Every scalar value, as sent to the submission endpoint."""
        return {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "preferred_contact": self.preferred_contact.value,
            "contact_time": self.contact_time,
            "service": self.service,
            "message": self.message,
            "privacy_accepted": self.privacy_accepted,
            "submission_token": self.submission_token,
        }
