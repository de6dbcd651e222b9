from __future__ import annotations

from abc import ABC, abstractmethod


class BotMitigationPort(ABC):
    @abstractmethod
    async def execute(self, action: str) -> str:
        """Return a one-time token scoped to the given action."""
        raise NotImplementedError
