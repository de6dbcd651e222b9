from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CandidateFile:
    """A file offered by the file picker, not yet vetted."""

    name: str
    content_type: str | None
    content: bytes = field(default=b"", repr=False)
    declared_size: int | None = None  # picker-reported size when content is not loaded yet

    @property
    def size(self) -> int:
        if self.declared_size is not None:
            return self.declared_size
        return len(self.content)


@dataclass(frozen=True)
class Attachment:
    name: str
    byte_size: int
    mime_type: str
    extension: str
    content: bytes = field(default=b"", repr=False, compare=False)
