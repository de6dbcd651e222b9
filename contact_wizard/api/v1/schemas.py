from typing import Any

from pydantic import BaseModel, Field

from contact_wizard.application.use_cases.inquiry_wizard import InquiryWizard


class CreateInquiryRequestSchema(BaseModel):
    client_id: str | None = Field(default=None, pattern=r"^[A-Za-z0-9_\-]{1,64}$")


class FieldUpdateRequestSchema(BaseModel):
    fields: dict[str, Any] = Field(min_length=1)


class EstimateRequestSchema(BaseModel):
    square_meters: int
    quality: str = "Standard"


class FormSchema(BaseModel):
    name: str
    email: str
    phone: str
    preferred_contact: str
    contact_time: str
    service: str
    message: str
    privacy_accepted: bool


class AttachmentSchema(BaseModel):
    name: str
    byte_size: int
    mime_type: str
    extension: str


class NotificationSchema(BaseModel):
    severity: str
    message: str


class RejectionSchema(BaseModel):
    filename: str
    reason: str
    message: str


class OutcomeSchema(BaseModel):
    success: bool
    field_errors: dict[str, str] = Field(default_factory=dict)
    transport_failure: bool = False
    token_failure: bool = False
    configuration_failure: bool = False


class SummarySchema(BaseModel):
    name: str
    email: str
    phone: str
    preferred_contact: str
    contact_time: str
    service: str
    message: str
    attachment_names: list[str] = Field(default_factory=list)


class WizardViewSchema(BaseModel):
    session_id: str
    step: int
    step_label: str
    progress: float
    form: FormSchema
    attachments: list[AttachmentSchema] = Field(default_factory=list)
    errors: dict[str, str] = Field(default_factory=dict)
    focus_field: str | None = None
    notification: NotificationSchema | None = None
    processing: bool = False
    is_available: bool = False
    available_actions: list[str] = Field(default_factory=list)
    whatsapp_link: str = ""
    service_options: list[str] = Field(default_factory=list)
    summary: SummarySchema | None = None
    moved: bool | None = None
    outcome: OutcomeSchema | None = None
    rejections: list[RejectionSchema] = Field(default_factory=list)

    @classmethod
    def from_wizard(cls, session_id: str, wizard: InquiryWizard, **extra: Any) -> "WizardViewSchema":
        form = wizard.form
        notification = wizard.notifications.current
        summary = wizard.summary
        return cls(
            session_id=session_id,
            step=int(wizard.current_step),
            step_label=wizard.sequencer.current_label,
            progress=wizard.sequencer.progress,
            form=FormSchema(
                name=form.name,
                email=form.email,
                phone=form.phone,
                preferred_contact=form.preferred_contact.value,
                contact_time=form.contact_time,
                service=form.service,
                message=form.message,
                privacy_accepted=form.privacy_accepted,
            ),
            attachments=[
                AttachmentSchema(name=a.name, byte_size=a.byte_size, mime_type=a.mime_type, extension=a.extension)
                for a in form.attachments
            ],
            errors=wizard.errors,
            focus_field=wizard.focus_field,
            notification=(
                NotificationSchema(severity=notification.severity.value, message=notification.message)
                if notification else None
            ),
            processing=wizard.processing,
            is_available=wizard.is_available,
            available_actions=list(wizard.available_actions),
            whatsapp_link=wizard.whatsapp_link,
            service_options=list(wizard.service_options),
            summary=(
                SummarySchema(
                    name=summary.name,
                    email=summary.email,
                    phone=summary.phone,
                    preferred_contact=summary.preferred_contact,
                    contact_time=summary.contact_time,
                    service=summary.service,
                    message=summary.message,
                    attachment_names=list(summary.attachment_names),
                )
                if summary else None
            ),
            **extra,
        )
