from __future__ import annotations

from abc import ABC, abstractmethod


class KeyValueStorePort(ABC):
    """Synchronous local store. Every call may raise; callers must treat it as fallible."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def remove(self, key: str) -> None:
        raise NotImplementedError
