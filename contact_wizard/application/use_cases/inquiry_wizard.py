from __future__ import annotations

import logging
from typing import Any, Callable, Sequence

from contact_wizard.application.exceptions import ConfigurationError, ValidationError
from contact_wizard.application.ports.bot_mitigation import BotMitigationPort
from contact_wizard.application.ports.key_value_store import KeyValueStorePort
from contact_wizard.application.ports.service_catalog import ServiceCatalogPort
from contact_wizard.application.ports.submission import SubmissionPort
from contact_wizard.application.ports.telemetry import TelemetryPort
from contact_wizard.application.use_cases.business_hours import AvailabilityMonitor
from contact_wizard.application.use_cases.draft_persistence import DraftPersistence
from contact_wizard.application.use_cases.step_sequencer import StepSequencer, TransitionResult
from contact_wizard.application.use_cases.submit_inquiry import DEFAULT_ACTION, SubmissionGateway
from contact_wizard.application.use_cases.validate_step import ValidationEngine
from contact_wizard.application.use_cases.vet_attachments import AttachmentVetter, VettingReport, remove_at
from contact_wizard.application.utils.notifications import NotificationChannel
from contact_wizard.application.utils.quote_estimate import (
    QuoteEstimate,
    estimate_quote,
    format_estimate_line,
    whatsapp_link,
)
from contact_wizard.domain.entities.attachment import CandidateFile
from contact_wizard.domain.entities.form_state import FormState
from contact_wizard.domain.entities.notification import Notification, Severity
from contact_wizard.domain.entities.step import WizardStep
from contact_wizard.domain.entities.submission import InquirySummary, SubmissionOutcome


DRAFT_RESTORED_MESSAGE = "Your draft was restored automatically."
RESET_MESSAGE = "The form has been reset."
SUCCESS_MESSAGE = "Thank you for your message! We will contact you within the next 24 hours."
FIELD_ERRORS_MESSAGE = "The form could not be sent. Please review the highlighted fields."
TOKEN_FAILURE_MESSAGE = "Security verification failed. Please try again."
CONFIGURATION_MESSAGE = "Security verification is not available. Please reload the page."
TRANSPORT_MESSAGE = "Something went wrong while sending your message. Please try again in a moment."


class InquiryWizard:
    """
    The multi-step contact form. Sole owner of the FormState and of every
    piece of UI-facing state derived from it (inline errors, focus intent,
    notifications, processing flag, success summary).

    Presentation layers call the handlers below and render the properties;
    none of the handlers raise for user-caused failures.
    """

    def __init__(
        self,
        submission: SubmissionPort,
        bot_mitigation: BotMitigationPort | None,
        draft_store: KeyValueStorePort,
        catalog: ServiceCatalogPort,
        telemetry: TelemetryPort | None = None,
        availability: AvailabilityMonitor | None = None,
        message_max_length: int = 1000,
        action: str = DEFAULT_ACTION,
        whatsapp_number: str | None = None,
        on_notify: Callable[[Notification], None] | None = None,
        session_id: str = "local",
    ) -> None:
        self._engine = ValidationEngine(message_max_length=message_max_length)
        self._vetter = AttachmentVetter()
        self._drafts = DraftPersistence(draft_store)
        self._sequencer = StepSequencer(self._engine)
        self._gateway = SubmissionGateway(
            submission=submission,
            bot_mitigation=bot_mitigation,
            engine=self._engine,
            sequencer=self._sequencer,
            drafts=self._drafts,
            action=action,
        )
        self._catalog = catalog
        self._telemetry = telemetry
        self._availability = availability
        self._notifications = NotificationChannel(listener=on_notify)
        self._whatsapp_number = whatsapp_number
        self._session_id = session_id
        self._logger = logging.getLogger(__name__)

        self._form = FormState()
        self._errors: dict[str, str] = {}
        self._focus_field: str | None = None
        self._processing = False
        self._summary: InquirySummary | None = None
        self._mounted = False
        self._generation = 0

    # --- read-only view -------------------------------------------------

    @property
    def form(self) -> FormState:
        return self._form

    @property
    def errors(self) -> dict[str, str]:
        return dict(self._errors)

    @property
    def focus_field(self) -> str | None:
        return self._focus_field

    @property
    def processing(self) -> bool:
        return self._processing

    @property
    def summary(self) -> InquirySummary | None:
        return self._summary

    @property
    def current_step(self) -> WizardStep:
        return self._sequencer.current

    @property
    def sequencer(self) -> StepSequencer:
        return self._sequencer

    @property
    def notifications(self) -> NotificationChannel:
        return self._notifications

    @property
    def is_available(self) -> bool:
        return self._availability.is_available if self._availability is not None else False

    @property
    def whatsapp_link(self) -> str:
        return whatsapp_link(self._whatsapp_number)

    @property
    def service_options(self) -> tuple[str, ...]:
        return tuple(entry.display_name for entry in self._catalog.list_services())

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def available_actions(self) -> tuple[str, ...]:
        if self._processing:
            return ()
        step = self._sequencer.current
        if step == WizardStep.TERMINAL:
            return ("reset",)
        if step == WizardStep.CONTACT:
            return ("next", "reset")
        if step == WizardStep.SERVICE:
            return ("back", "next", "reset")
        return ("back", "submit", "reset")

    # --- lifecycle ------------------------------------------------------

    def mount(self) -> None:
        if self._mounted:
            return
        self._mounted = True
        self._processing = False
        self._form, restored = self._drafts.restore(self._form)
        if self._form.service and self._known_service(self._form.service) is None:
            # the catalog changed since the draft was saved
            self._form = self._form.with_field("service", "")
        if restored:
            self._notifications.publish(Severity.INFO, DRAFT_RESTORED_MESSAGE)
        if self._availability is not None:
            self._availability.start()
        self._logger.info("Wizard mounted", extra={"session_id": self._session_id, "event": "mounted"})

    def unmount(self) -> None:
        """Stop the background task; any in-flight submission result is dropped."""
        self._mounted = False
        self._generation += 1
        self._processing = False
        if self._availability is not None:
            self._availability.stop()
        self._logger.info("Wizard unmounted", extra={"session_id": self._session_id, "event": "unmounted"})

    # --- field edits ----------------------------------------------------

    def _apply(self, form: FormState, persist: bool = True) -> None:
        previous = self._form
        self._form = form
        if persist:
            self._drafts.observe(previous, form)

    def _edits_blocked(self) -> bool:
        return self._processing or self._sequencer.is_terminal

    def _known_service(self, value: str) -> str | None:
        entry = self._catalog.get_service(value)
        return entry.display_name if entry is not None else None

    def set_field(self, name: str, value: Any) -> bool:
        """
        Update one field. Returns False when edits are currently disabled.
        Raises ValueError for unknown fields, values that do not coerce and
        services missing from the catalog.
        """
        if self._edits_blocked():
            self._logger.debug("Field edit ignored", extra={"field": name, "session_id": self._session_id})
            return False
        if name == "service" and value:
            service = self._known_service(str(value))
            if service is None:
                raise ValueError(f"Unknown service: {value}")
            value = service
        self._apply(self._form.with_field(name, value))
        self._errors.pop(name, None)
        return True

    def append_estimate(self, square_meters: int, quality: str) -> QuoteEstimate | None:
        """Append an indicative price range for the selected service to the message."""
        if self._edits_blocked():
            return None
        rate = self._catalog.get_price_per_sqm(self._form.service)
        estimate = estimate_quote(square_meters, quality, rate)
        self.set_field("message", self._form.message + format_estimate_line(estimate, self._form.service))
        return estimate

    # --- attachments ----------------------------------------------------

    def add_files(self, candidates: Sequence[CandidateFile]) -> VettingReport | None:
        if self._edits_blocked():
            self._logger.warning(
                "Attachments offered while edits are disabled",
                extra={
                    "step": int(self._sequencer.current),
                    "reason": "processing" if self._processing else "terminal",
                    "session_id": self._session_id,
                },
            )
            return None
        if self._sequencer.current != WizardStep.ATTACHMENTS:
            self._logger.warning(
                "Attachments offered outside the attachments step",
                extra={"step": int(self._sequencer.current), "session_id": self._session_id},
            )
            return None

        report = self._vetter.vet(candidates, self._form.attachments)
        if report.error_message:
            self._notifications.publish(Severity.ERROR, report.error_message)
        if report.added:
            self._apply(self._form.with_attachments(report.attachments))
            self._errors.pop("attachments", None)
            self._notifications.publish(Severity.SUCCESS, report.success_message or "")
            self._track("inquiry_attachments_added", {"count": len(report.added)})
        return report

    def remove_attachment(self, index: int) -> bool:
        if self._edits_blocked():
            return False
        remaining = remove_at(self._form.attachments, index)
        if len(remaining) == len(self._form.attachments):
            return False
        self._apply(self._form.with_attachments(remaining))
        return True

    # --- navigation -----------------------------------------------------

    def next(self) -> TransitionResult:
        if self._processing:
            return TransitionResult(moved=False, step=self._sequencer.current)
        result = self._sequencer.next(self._form)
        if result.moved:
            self._focus_field = None
            self._track("inquiry_step_changed", {"step": int(result.step)})
        elif result.field is not None:
            self._errors[result.field] = result.message or ""
            self._focus_field = result.field
            self._notifications.publish(Severity.WARNING, result.message or "")
        return result

    def back(self) -> TransitionResult:
        if self._processing:
            return TransitionResult(moved=False, step=self._sequencer.current)
        result = self._sequencer.back()
        if result.moved:
            self._track("inquiry_step_changed", {"step": int(result.step)})
        return result

    def reset(self) -> None:
        """Clear everything and return to the first step. Also the success screen's retry action."""
        self._generation += 1
        self._processing = False
        self._apply(FormState(), persist=False)
        self._drafts.erase()
        self._sequencer.reset()
        self._errors.clear()
        self._focus_field = None
        self._summary = None
        self._notifications.publish(Severity.INFO, RESET_MESSAGE)

    # --- submission -----------------------------------------------------

    async def submit(self) -> SubmissionOutcome | None:
        """
        Run the submission protocol from the final step.
        Returns None when no attempt was made (wrong step or already processing).
        """
        if self._processing or not self._sequencer.can_submit:
            return None

        generation = self._generation

        def is_current() -> bool:
            return self._generation == generation

        local_message: str | None = None
        self._processing = True
        try:
            outcome = await self._gateway.submit(self._form, is_current)
        except ValidationError as e:
            local_message = e.message
            outcome = SubmissionOutcome(success=False, field_errors={e.field: e.message}, focus_field=e.field)
        except ConfigurationError as e:
            self._logger.error("Submission blocked", extra={"reason": str(e), "session_id": self._session_id})
            outcome = SubmissionOutcome(success=False, configuration_failure=True)
        finally:
            if is_current():
                self._processing = False

        if outcome.discarded or not is_current():
            return outcome

        self._apply_outcome(outcome, local_message)
        return outcome

    def _apply_outcome(self, outcome: SubmissionOutcome, local_message: str | None = None) -> None:
        if outcome.success:
            # Attachments are released once the endpoint has them.
            self._apply(self._form.with_attachments(()), persist=False)
            self._summary = outcome.summary
            self._errors.clear()
            self._focus_field = None
            self._notifications.publish(Severity.SUCCESS, SUCCESS_MESSAGE)
            self._track("inquiry_submitted", {"service": self._form.service})
            return

        if outcome.configuration_failure:
            self._notifications.publish(Severity.ERROR, CONFIGURATION_MESSAGE)
            return

        if outcome.transport_failure:
            self._notifications.publish(Severity.ERROR, TRANSPORT_MESSAGE)
            return

        self._errors.update(outcome.field_errors)
        if outcome.focus_field is not None:
            self._focus_field = outcome.focus_field
        if outcome.token_failure:
            self._notifications.publish(Severity.ERROR, TOKEN_FAILURE_MESSAGE)
        elif local_message:
            self._notifications.publish(Severity.WARNING, local_message)
        else:
            self._notifications.publish(Severity.WARNING, FIELD_ERRORS_MESSAGE)

    def _track(self, event: str, properties: dict[str, Any]) -> None:
        if self._telemetry is None:
            return
        try:
            self._telemetry.emit(event, {"session_id": self._session_id, **properties})
        except Exception as e:
            self._logger.debug("Telemetry emit failed", extra={"event": event, "reason": str(e)})
