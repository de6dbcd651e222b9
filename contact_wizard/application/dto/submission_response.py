from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator


class SubmissionResponse(BaseModel):
    success: bool = True
    message: str | None = None
    errors: dict[str, str] = Field(default_factory=dict)

    @field_validator("errors", mode="before")
    @classmethod
    def _first_message_per_field(cls, value: Any) -> dict[str, str]:
        # Endpoints answer either {"email": "..."} or {"email": ["...", "..."]}.
        if not value:
            return {}
        normalized: dict[str, str] = {}
        for field_name, messages in dict(value).items():
            if isinstance(messages, (list, tuple)):
                messages = messages[0] if messages else ""
            normalized[str(field_name)] = str(messages)
        return normalized
