from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable

from contact_wizard.domain.entities.form_state import FormState


class WizardStep(IntEnum):
    CONTACT = 0
    SERVICE = 1
    ATTACHMENTS = 2
    TERMINAL = 3


# A field validator returns (field, message) for a broken rule, or None when it holds.
FieldValidator = Callable[[FormState], "tuple[str, str] | None"]


@dataclass(frozen=True)
class StepDefinition:
    index: WizardStep
    label: str
    validators: tuple[FieldValidator, ...] = ()
