from __future__ import annotations

import logging
from dataclasses import dataclass

from contact_wizard.application.use_cases.validate_step import ValidationEngine
from contact_wizard.domain.entities.form_state import FormState
from contact_wizard.domain.entities.step import WizardStep


@dataclass(frozen=True)
class TransitionResult:
    moved: bool
    step: WizardStep
    field: str | None = None  # first violated rule, when a Next was rejected
    message: str | None = None


class StepSequencer:
    """
    Step0 (contact) -> Step1 (service & message) -> Step2 (attachments & consent) -> Terminal.

    Next is guarded by the ValidationEngine; Back is not. Terminal is absorbing
    and only Reset leaves it. Reaching Terminal is reserved to a confirmed
    submission (complete()).
    """

    def __init__(self, engine: ValidationEngine) -> None:
        self._engine = engine
        self._current = WizardStep.CONTACT
        self._completed: set[WizardStep] = set()
        self._logger = logging.getLogger(__name__)

    @property
    def current(self) -> WizardStep:
        return self._current

    @property
    def current_label(self) -> str:
        return self._engine.steps[self._current].label

    @property
    def is_terminal(self) -> bool:
        return self._current == WizardStep.TERMINAL

    @property
    def is_first_step(self) -> bool:
        return self._current == WizardStep.CONTACT

    @property
    def is_last_input_step(self) -> bool:
        return self._current == WizardStep.ATTACHMENTS

    @property
    def can_submit(self) -> bool:
        return self._current == WizardStep.ATTACHMENTS

    @property
    def completed_steps(self) -> tuple[WizardStep, ...]:
        return tuple(sorted(self._completed))

    @property
    def progress(self) -> float:
        """Percentage through the visible steps (the confirmation step counts)."""
        return (int(self._current) + 1) / len(WizardStep) * 100

    def next(self, form: FormState) -> TransitionResult:
        if self._current == WizardStep.TERMINAL:
            return TransitionResult(moved=False, step=self._current)

        result = self._engine.check_step(self._current, form)
        violation = result.first_violation
        if violation is not None:
            field_name, message = violation
            self._logger.info("Step advance rejected", extra={"step": int(self._current), "field": field_name})
            return TransitionResult(moved=False, step=self._current, field=field_name, message=message)

        # Step2 is left only through a successful submission.
        if self._current == WizardStep.ATTACHMENTS:
            return TransitionResult(moved=False, step=self._current)

        self._completed.add(self._current)
        self._current = WizardStep(self._current + 1)
        return TransitionResult(moved=True, step=self._current)

    def back(self) -> TransitionResult:
        if self._current in (WizardStep.CONTACT, WizardStep.TERMINAL):
            return TransitionResult(moved=False, step=self._current)
        self._current = WizardStep(self._current - 1)
        return TransitionResult(moved=True, step=self._current)

    def complete(self) -> None:
        """Move to Terminal after a confirmed submission. Only valid from Step2."""
        if not self.can_submit:
            raise RuntimeError(f"Cannot complete the wizard from step {int(self._current)}")
        self._completed.add(self._current)
        self._current = WizardStep.TERMINAL

    def reset(self) -> None:
        self._current = WizardStep.CONTACT
        self._completed.clear()
