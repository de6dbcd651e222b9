from __future__ import annotations

import re

from contact_wizard.domain.entities.form_state import FormState
from contact_wizard.domain.entities.step import FieldValidator, StepDefinition, WizardStep
from contact_wizard.domain.entities.validation import ValidationResult


EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^[\d\s+\-()]+$")
MESSAGE_MIN_LENGTH = 10
DEFAULT_MESSAGE_MAX_LENGTH = 1000


def _name_present(form: FormState) -> tuple[str, str] | None:
    if not form.name.strip():
        return "name", "Name is required."
    return None


def _email_valid(form: FormState) -> tuple[str, str] | None:
    if not form.email.strip():
        return "email", "Email is required."
    if not EMAIL_PATTERN.match(form.email):
        return "email", "Email is not valid."
    return None


def _phone_present_when_required(form: FormState) -> tuple[str, str] | None:
    if form.phone_required and not form.phone.strip():
        return "phone", f"Phone is required when contacting by {form.preferred_contact.value}."
    return None


def _phone_format(form: FormState) -> tuple[str, str] | None:
    if form.phone and not PHONE_PATTERN.match(form.phone):
        return "phone", "Phone format is not valid."
    return None


def _privacy_accepted(form: FormState) -> tuple[str, str] | None:
    if not form.privacy_accepted:
        return "privacy_accepted", "You must accept the privacy policy."
    return None


def message_length_rule(max_length: int) -> FieldValidator:
    def _message_length(form: FormState) -> tuple[str, str] | None:
        if not form.message.strip():
            return "message", "Message is required."
        if len(form.message) < MESSAGE_MIN_LENGTH:
            return "message", f"Message must be at least {MESSAGE_MIN_LENGTH} characters."
        if len(form.message) > max_length:
            return "message", f"Message must be at most {max_length} characters."
        return None

    return _message_length


def build_step_definitions(message_max_length: int) -> tuple[StepDefinition, ...]:
    return (
        StepDefinition(
            WizardStep.CONTACT,
            "Contact details",
            (_name_present, _email_valid, _phone_present_when_required, _phone_format),
        ),
        StepDefinition(
            WizardStep.SERVICE,
            "Service and message",
            (message_length_rule(message_max_length),),
        ),
        StepDefinition(WizardStep.ATTACHMENTS, "Attachments and consent", (_privacy_accepted,)),
        StepDefinition(WizardStep.TERMINAL, "Confirmation"),
    )


# Catalogue for the standard deployment profile.
STEP_DEFINITIONS = build_step_definitions(DEFAULT_MESSAGE_MAX_LENGTH)


class ValidationEngine:
    """Evaluates each step's rules in precedence order. Pure: never touches the form."""

    def __init__(self, message_max_length: int = DEFAULT_MESSAGE_MAX_LENGTH) -> None:
        if message_max_length == DEFAULT_MESSAGE_MAX_LENGTH:
            self._steps = STEP_DEFINITIONS
        else:
            self._steps = build_step_definitions(message_max_length)

    @property
    def steps(self) -> tuple[StepDefinition, ...]:
        return self._steps

    def check_step(self, step: int, form: FormState) -> ValidationResult:
        definition = self._steps[WizardStep(step)]
        errors: dict[str, str] = {}
        for validator in definition.validators:
            violation = validator(form)
            if violation is None:
                continue
            field_name, message = violation
            errors.setdefault(field_name, message)
        return ValidationResult(step=definition.index, errors=errors)

    def validate_step(self, step: int, form: FormState) -> bool:
        return self.check_step(step, form).is_valid

    def validate_all(self, form: FormState) -> ValidationResult | None:
        """Return the first failing input step's result, or None if every step passes."""
        for step in (WizardStep.CONTACT, WizardStep.SERVICE, WizardStep.ATTACHMENTS):
            result = self.check_step(step, form)
            if not result.is_valid:
                return result
        return None
