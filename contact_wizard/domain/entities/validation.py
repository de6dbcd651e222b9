from __future__ import annotations

from dataclasses import dataclass, field

from contact_wizard.domain.entities.step import WizardStep


@dataclass(frozen=True)
class ValidationResult:
    step: WizardStep
    errors: dict[str, str] = field(default_factory=dict)  # insertion order = rule precedence

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def first_violation(self) -> tuple[str, str] | None:
        for field_name, message in self.errors.items():
            return field_name, message
        return None
