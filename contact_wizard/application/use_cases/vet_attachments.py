from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Sequence

from contact_wizard.application.exceptions import AttachmentRejected
from contact_wizard.domain.entities.attachment import Attachment, CandidateFile


MAX_ATTACHMENTS = 5
MIN_ATTACHMENT_BYTES = 100
MAX_ATTACHMENT_BYTES = 5 * 1024 * 1024  # 5MB

EXTENSION_MIME_TYPES = {
    "pdf": "application/pdf",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
}
ALLOWED_EXTENSIONS = frozenset(EXTENSION_MIME_TYPES)
ALLOWED_CONTENT_TYPES = frozenset(EXTENSION_MIME_TYPES.values())
SAFE_FILENAME_PATTERN = re.compile(r"^[a-zA-Z0-9._\- ]+$")

# Hint for the file picker; the vetter re-checks everything regardless.
ACCEPTED_FILE_TYPES = ",".join(f".{ext}" for ext in EXTENSION_MIME_TYPES)

LIMIT_EXCEEDED = "limit_exceeded"
EXTENSION_NOT_ALLOWED = "extension_not_allowed"
TYPE_NOT_ALLOWED = "type_not_allowed"
TOO_SMALL = "too_small"
TOO_LARGE = "too_large"
INVALID_FILENAME = "invalid_filename"


@dataclass(frozen=True)
class VettingReport:
    attachments: tuple[Attachment, ...]  # full list after this batch
    added: tuple[Attachment, ...] = ()
    rejections: tuple[AttachmentRejected, ...] = ()
    limit_exceeded: bool = False

    @property
    def error_message(self) -> str | None:
        if self.limit_exceeded:
            return f"A maximum of {MAX_ATTACHMENTS} files is allowed."
        if not self.rejections:
            return None
        return "\n".join(f"{r.filename}: {r.message}" for r in self.rejections)

    @property
    def success_message(self) -> str | None:
        if not self.added:
            return None
        return f"{len(self.added)} file(s) added successfully."


def file_extension(filename: str) -> str:
    if "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


class AttachmentVetter:
    def __init__(self, max_attachments: int = MAX_ATTACHMENTS) -> None:
        self._max_attachments = max_attachments
        self._logger = logging.getLogger(__name__)

    def vet(self, candidates: Sequence[CandidateFile], accepted: Sequence[Attachment]) -> VettingReport:
        accepted = tuple(accepted)
        if len(accepted) + len(candidates) > self._max_attachments:
            self._logger.info(
                "Attachment batch rejected",
                extra={"reason": LIMIT_EXCEEDED, "attachment_count": len(candidates)},
            )
            return VettingReport(attachments=accepted, limit_exceeded=True)

        added: list[Attachment] = []
        rejections: list[AttachmentRejected] = []
        for candidate in candidates:
            try:
                added.append(self.check(candidate))
            except AttachmentRejected as rejection:
                self._logger.info("Attachment rejected", extra={"reason": rejection.reason})
                rejections.append(rejection)

        return VettingReport(
            attachments=accepted + tuple(added),
            added=tuple(added),
            rejections=tuple(rejections),
        )

    def check(self, candidate: CandidateFile) -> Attachment:
        """Vet one file. Raises AttachmentRejected with the first broken rule."""
        name = candidate.name
        extension = file_extension(name)
        if extension not in ALLOWED_EXTENSIONS:
            raise AttachmentRejected(name, EXTENSION_NOT_ALLOWED, "Extension not allowed. Only PDF, JPG, JPEG, PNG.")

        content_type = (candidate.content_type or "").lower()
        if content_type not in ALLOWED_CONTENT_TYPES:
            raise AttachmentRejected(name, TYPE_NOT_ALLOWED, "File type not allowed.")

        size = candidate.size
        if size < MIN_ATTACHMENT_BYTES:
            raise AttachmentRejected(name, TOO_SMALL, "File is too small or empty.")
        if size > MAX_ATTACHMENT_BYTES:
            raise AttachmentRejected(
                name, TOO_LARGE, f"File exceeds 5MB ({size / 1024 / 1024:.2f}MB)."
            )

        if not SAFE_FILENAME_PATTERN.match(name):
            raise AttachmentRejected(name, INVALID_FILENAME, "File name contains characters that are not allowed.")

        return Attachment(
            name=name,
            byte_size=size,
            mime_type=content_type,
            extension=extension,
            content=candidate.content,
        )


def remove_at(attachments: Sequence[Attachment], index: int) -> tuple[Attachment, ...]:
    """Drop the attachment at `index`; out-of-range indexes leave the list unchanged."""
    if index < 0 or index >= len(attachments):
        return tuple(attachments)
    return tuple(a for i, a in enumerate(attachments) if i != index)
