from __future__ import annotations

import logging
from typing import Any

from contact_wizard.application.ports.telemetry import TelemetryPort


class LoggingTelemetry(TelemetryPort):
    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def emit(self, event: str, properties: dict[str, Any] | None = None) -> None:
        self._logger.info("Telemetry event", extra={"event": event, "properties": dict(properties or {})})
