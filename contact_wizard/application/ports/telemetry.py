from abc import ABC, abstractmethod
from typing import Any


class TelemetryPort(ABC):
    @abstractmethod
    def emit(self, event: str, properties: dict[str, Any] | None = None) -> None:
        raise NotImplementedError
