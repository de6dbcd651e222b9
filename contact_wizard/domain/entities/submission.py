from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class InquirySummary:
    """Read-only view of what was sent, shown on the success screen."""

    name: str
    email: str
    phone: str
    preferred_contact: str
    contact_time: str
    service: str
    message: str
    attachment_names: tuple[str, ...] = ()


@dataclass(frozen=True)
class SubmissionOutcome:
    success: bool
    field_errors: dict[str, str] = field(default_factory=dict)
    transport_failure: bool = False
    token_failure: bool = False
    configuration_failure: bool = False
    discarded: bool = False  # result arrived after the wizard was torn down
    focus_field: str | None = None
    summary: InquirySummary | None = None
