"""
Tests for per-step validation rules and their precedence.
"""

from __future__ import annotations

from contact_wizard.application.use_cases.validate_step import STEP_DEFINITIONS, ValidationEngine
from contact_wizard.domain.entities.form_state import FormState, PreferredContact
from contact_wizard.domain.entities.step import WizardStep


def _contact(**overrides) -> FormState:
    values = {"name": "Ana Ruiz", "email": "ana@example.com"}
    values.update(overrides)
    form = FormState()
    for key, value in values.items():
        form = form.with_field(key, value)
    return form


def test_name_is_checked_before_email():
    """An empty form reports the name first."""
    engine = ValidationEngine()
    result = engine.check_step(WizardStep.CONTACT, FormState())

    assert not result.is_valid
    assert result.first_violation == ("name", "Name is required.")
    assert result.errors["email"] == "Email is required."


def test_whitespace_name_is_rejected():
    engine = ValidationEngine()
    result = engine.check_step(WizardStep.CONTACT, _contact(name="   "))
    assert result.first_violation == ("name", "Name is required.")


def test_email_format():
    """Emails need a local part, a domain and a dot after the @."""
    engine = ValidationEngine()
    assert engine.validate_step(WizardStep.CONTACT, _contact(email="a@b.co"))
    for bad in ("ana", "ana@example", "ana @example.com", "@example.com"):
        result = engine.check_step(WizardStep.CONTACT, _contact(email=bad))
        assert result.first_violation == ("email", "Email is not valid."), bad


def test_phone_required_for_phone_and_whatsapp():
    engine = ValidationEngine()
    assert engine.validate_step(WizardStep.CONTACT, _contact(preferred_contact="Email"))

    for method in (PreferredContact.PHONE, PreferredContact.WHATSAPP):
        result = engine.check_step(WizardStep.CONTACT, _contact(preferred_contact=method.value))
        assert result.first_violation == ("phone", f"Phone is required when contacting by {method.value}.")

    form = _contact(preferred_contact="WhatsApp", phone="+34 600 123 456")
    assert engine.validate_step(WizardStep.CONTACT, form)


def test_optional_phone_still_checked_for_format():
    engine = ValidationEngine()
    result = engine.check_step(WizardStep.CONTACT, _contact(phone="call me"))
    assert result.first_violation == ("phone", "Phone format is not valid.")
    assert engine.validate_step(WizardStep.CONTACT, _contact(phone="(+34) 600-123-456"))


def test_message_length_bounds():
    """Message must have between 10 and the configured maximum characters."""
    engine = ValidationEngine(message_max_length=1000)

    result = engine.check_step(WizardStep.SERVICE, _contact(message=""))
    assert result.first_violation == ("message", "Message is required.")

    result = engine.check_step(WizardStep.SERVICE, _contact(message="too short"))
    assert result.first_violation == ("message", "Message must be at least 10 characters.")

    assert engine.validate_step(WizardStep.SERVICE, _contact(message="x" * 10))
    assert engine.validate_step(WizardStep.SERVICE, _contact(message="x" * 1000))

    result = engine.check_step(WizardStep.SERVICE, _contact(message="x" * 1001))
    assert result.first_violation == ("message", "Message must be at most 1000 characters.")


def test_extended_profile_allows_longer_messages():
    engine = ValidationEngine(message_max_length=2000)
    assert engine.validate_step(WizardStep.SERVICE, _contact(message="x" * 1500))
    assert not engine.validate_step(WizardStep.SERVICE, _contact(message="x" * 2001))


def test_service_is_optional():
    engine = ValidationEngine()
    assert engine.validate_step(WizardStep.SERVICE, _contact(service="", message="Hello, I need a quote."))


def test_privacy_consent_required_on_last_step():
    engine = ValidationEngine()
    result = engine.check_step(WizardStep.ATTACHMENTS, FormState())
    assert result.first_violation == ("privacy_accepted", "You must accept the privacy policy.")
    assert engine.validate_step(WizardStep.ATTACHMENTS, _contact(privacy_accepted=True))


def test_confirmation_step_has_no_rules():
    engine = ValidationEngine()
    assert engine.validate_step(WizardStep.TERMINAL, FormState())


def test_validate_all_returns_first_failing_step():
    engine = ValidationEngine()
    form = _contact(message="short", privacy_accepted=False)

    failing = engine.validate_all(form)
    assert failing is not None
    assert failing.step == WizardStep.SERVICE

    complete = _contact(message="I would like a full renovation.", privacy_accepted=True)
    assert engine.validate_all(complete) is None


def test_validation_does_not_modify_form():
    engine = ValidationEngine()
    form = _contact(email="broken")
    engine.check_step(WizardStep.CONTACT, form)
    assert form.email == "broken"


def test_step_labels():
    engine = ValidationEngine()
    labels = [definition.label for definition in engine.steps]
    assert labels == ["Contact details", "Service and message", "Attachments and consent", "Confirmation"]


def test_standard_profile_uses_static_catalogue():
    assert ValidationEngine().steps is STEP_DEFINITIONS
    assert ValidationEngine(message_max_length=2000).steps is not STEP_DEFINITIONS
    assert [definition.index for definition in STEP_DEFINITIONS] == list(WizardStep)


def test_blank_message_counts_as_missing():
    """Whitespace padding does not satisfy the minimum length."""
    engine = ValidationEngine()
    result = engine.check_step(WizardStep.SERVICE, _contact(message=" " * 12))
    assert result.first_violation == ("message", "Message is required.")
