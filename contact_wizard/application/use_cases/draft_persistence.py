from __future__ import annotations

import json
import logging
from typing import Any, Callable, TypeVar

from contact_wizard.application.exceptions import PersistenceError
from contact_wizard.application.ports.key_value_store import KeyValueStorePort
from contact_wizard.domain.entities.form_state import FormState


DRAFT_KEY = "contact_form_draft"

# Whitelisted projection of FormState; attachments and the token never leave memory.
DRAFT_FIELDS = (
    "name",
    "email",
    "phone",
    "preferred_contact",
    "contact_time",
    "service",
    "message",
    "privacy_accepted",
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def discard_persistence_error(error: PersistenceError, operation: str) -> None:
    """
    Policy for draft I/O failures: the draft is a convenience, so a failed
    read, write or delete is logged at DEBUG and otherwise ignored.
    The user never sees it and form state is never affected.
    """
    logger.debug(
        "Draft %s failed; ignoring",
        operation,
        extra={"event": "draft_io_failed", "reason": str(error)},
    )


def project_draft(form: FormState) -> dict[str, Any]:
    scalars = form.scalar_fields()
    return {key: scalars[key] for key in DRAFT_FIELDS}


class DraftPersistence:
    def __init__(self, store: KeyValueStorePort, key: str = DRAFT_KEY) -> None:
        self._store = store
        self._key = key

    def _attempt(self, operation: str, action: Callable[[], T]) -> T | None:
        try:
            return action()
        except Exception as e:
            discard_persistence_error(PersistenceError(f"{type(e).__name__}: {e}"), operation)
            return None

    def restore(self, form: FormState) -> tuple[FormState, bool]:
        """
        Overlay the stored draft onto `form`.
        Returns the new form and whether any field was restored.
        """
        raw = self._attempt("read", lambda: self._store.get(self._key))
        if not raw:
            return form, False

        record = self._attempt("decode", lambda: json.loads(raw))
        if not isinstance(record, dict):
            return form, False

        restored = False
        for key in DRAFT_FIELDS:
            if key not in record:
                continue
            try:
                form = form.with_field(key, record[key])
            except (ValueError, TypeError):
                # e.g. a contact method that no longer exists
                continue
            restored = True
        return form, restored

    def save(self, form: FormState) -> None:
        self._attempt(
            "write",
            lambda: self._store.set(self._key, json.dumps(project_draft(form), ensure_ascii=False)),
        )

    def observe(self, previous: FormState, current: FormState) -> None:
        """Autosave when a watched field changed between two states."""
        if project_draft(previous) != project_draft(current):
            self.save(current)

    def erase(self) -> None:
        self._attempt("delete", lambda: self._store.remove(self._key))
