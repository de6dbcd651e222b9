from __future__ import annotations

import logging
from typing import Callable

from contact_wizard.application.dto.inquiry_payload import InquiryPayload
from contact_wizard.application.exceptions import (
    ConfigurationError,
    ServerValidationError,
    TransportError,
    ValidationError,
)
from contact_wizard.application.ports.bot_mitigation import BotMitigationPort
from contact_wizard.application.ports.submission import SubmissionPort
from contact_wizard.application.use_cases.draft_persistence import DraftPersistence
from contact_wizard.application.use_cases.step_sequencer import StepSequencer
from contact_wizard.application.use_cases.validate_step import ValidationEngine
from contact_wizard.domain.entities.form_state import FOCUS_ORDER, FormState
from contact_wizard.domain.entities.submission import InquirySummary, SubmissionOutcome


DEFAULT_ACTION = "contact_form"

# Error keys the endpoint uses when the bot-mitigation token is rejected.
TOKEN_ERROR_FIELDS = ("submission_token", "recaptcha_token")


def first_focus_field(field_errors: dict[str, str]) -> str | None:
    for field_name in FOCUS_ORDER:
        if field_name in field_errors:
            return field_name
    return None


def summarize(form: FormState) -> InquirySummary:
    return InquirySummary(
        name=form.name,
        email=form.email,
        phone=form.phone,
        preferred_contact=form.preferred_contact.value,
        contact_time=form.contact_time,
        service=form.service,
        message=form.message,
        attachment_names=tuple(a.name for a in form.attachments),
    )


def _always_current() -> bool:
    return True


class SubmissionGateway:
    """
    Token acquisition, transmission and result mapping for the final step.

    Preconditions are raised (ConfigurationError, ValidationError); every
    failure after that point is folded into the returned SubmissionOutcome.
    """

    def __init__(
        self,
        submission: SubmissionPort,
        bot_mitigation: BotMitigationPort | None,
        engine: ValidationEngine,
        sequencer: StepSequencer,
        drafts: DraftPersistence,
        action: str = DEFAULT_ACTION,
    ) -> None:
        self._submission = submission
        self._bot_mitigation = bot_mitigation
        self._engine = engine
        self._sequencer = sequencer
        self._drafts = drafts
        self._action = action
        self._logger = logging.getLogger(__name__)

    async def submit(
        self,
        form: FormState,
        is_current: Callable[[], bool] = _always_current,
    ) -> SubmissionOutcome:
        failing = self._engine.validate_all(form)
        if failing is not None:
            field_name, message = failing.first_violation
            raise ValidationError(field_name, message)

        if self._bot_mitigation is None:
            raise ConfigurationError("Bot-mitigation provider is not configured (missing site key).")

        try:
            token = await self._bot_mitigation.execute(self._action)
        except Exception as e:
            if not is_current():
                return SubmissionOutcome(success=False, discarded=True)
            self._logger.warning("Bot-mitigation token acquisition failed", extra={"reason": str(e)})
            return SubmissionOutcome(success=False, token_failure=True)

        if not is_current():
            return SubmissionOutcome(success=False, discarded=True)

        payload = InquiryPayload.from_form(form.with_submission_token(token))
        try:
            await self._submission.submit(payload)
        except ServerValidationError as e:
            if not is_current():
                return SubmissionOutcome(success=False, discarded=True)
            token_failure = any(key in e.field_errors for key in TOKEN_ERROR_FIELDS)
            self._logger.info(
                "Inquiry rejected by endpoint",
                extra={"event": "inquiry_rejected", "reason": ",".join(sorted(e.field_errors))},
            )
            return SubmissionOutcome(
                success=False,
                field_errors=e.field_errors,
                token_failure=token_failure,
                focus_field=first_focus_field(e.field_errors),
            )
        except Exception as e:
            if not is_current():
                return SubmissionOutcome(success=False, discarded=True)
            reason = str(e) if isinstance(e, TransportError) else f"unexpected: {type(e).__name__}"
            self._logger.warning("Inquiry transmission failed", extra={"reason": reason})
            return SubmissionOutcome(success=False, transport_failure=True)

        if not is_current():
            self._logger.info("Discarding submission result for a torn-down wizard")
            return SubmissionOutcome(success=True, discarded=True)

        self._sequencer.complete()
        self._drafts.erase()
        self._logger.info(
            "Inquiry submitted",
            extra={"event": "inquiry_submitted", "attachment_count": len(form.attachments)},
        )
        return SubmissionOutcome(success=True, summary=summarize(form))
