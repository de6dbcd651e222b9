from __future__ import annotations

import logging
import time
from typing import Callable
from uuid import uuid4

from contact_wizard.application.use_cases.inquiry_wizard import InquiryWizard
from contact_wizard.core.config import settings
from contact_wizard.wiring.dependencies import build_wizard


WizardFactory = Callable[..., InquiryWizard]


class InquirySessionRegistry:
    """
    Live wizard instances for the HTTP surface, one per browser session.

    Sessions untouched for `idle_timeout_seconds` are unmounted and dropped
    on the next create/get; the draft stays in its store.
    """

    def __init__(
        self,
        factory: WizardFactory = build_wizard,
        idle_timeout_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._factory = factory
        self._idle_timeout = (
            idle_timeout_seconds if idle_timeout_seconds is not None else settings.SESSION_IDLE_TIMEOUT_SECONDS
        )
        self._clock = clock
        self._sessions: dict[str, InquiryWizard] = {}
        self._last_seen: dict[str, float] = {}
        self._logger = logging.getLogger(__name__)

    def _sweep(self) -> None:
        cutoff = self._clock() - self._idle_timeout
        expired = [session_id for session_id, seen in self._last_seen.items() if seen < cutoff]
        for session_id in expired:
            self._logger.info("Inquiry session expired", extra={"session_id": session_id, "event": "expired"})
            self.close(session_id)

    def create(self, client_id: str | None = None) -> tuple[str, InquiryWizard]:
        self._sweep()
        session_id = uuid4().hex
        wizard = self._factory(client_id=client_id, session_id=session_id)
        wizard.mount()
        self._sessions[session_id] = wizard
        self._last_seen[session_id] = self._clock()
        self._logger.info("Inquiry session created", extra={"session_id": session_id})
        return session_id, wizard

    def get(self, session_id: str) -> InquiryWizard | None:
        self._sweep()
        wizard = self._sessions.get(session_id)
        if wizard is not None:
            self._last_seen[session_id] = self._clock()
        return wizard

    def close(self, session_id: str) -> bool:
        self._last_seen.pop(session_id, None)
        wizard = self._sessions.pop(session_id, None)
        if wizard is None:
            return False
        wizard.unmount()
        return True

    def close_all(self) -> None:
        for session_id in list(self._sessions):
            self.close(session_id)

    def __len__(self) -> int:
        return len(self._sessions)


_registry: InquirySessionRegistry | None = None


def get_session_registry() -> InquirySessionRegistry:
    global _registry
    if _registry is None:
        _registry = InquirySessionRegistry()
    return _registry
