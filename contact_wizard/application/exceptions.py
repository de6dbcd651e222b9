from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when the bot-mitigation provider was never initialized (no site key)."""
    pass


class ValidationError(ValueError):
    """Raised when a step fails local validation."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class AttachmentRejected(ValueError):
    """Raised for a single candidate file that fails vetting."""

    def __init__(self, filename: str, reason: str, message: str) -> None:
        super().__init__(message)
        self.filename = filename
        self.reason = reason
        self.message = message


class ServerValidationError(RuntimeError):
    """Raised when the submission endpoint answers with field-keyed errors."""

    def __init__(self, field_errors: dict[str, str]) -> None:
        super().__init__(", ".join(sorted(field_errors)) or "server validation failed")
        self.field_errors = dict(field_errors)


class TransportError(RuntimeError):
    """Raised on network failures or unexpected responses during submission."""
    pass


class PersistenceError(RuntimeError):
    """Raised when the local draft store cannot be read or written."""
    pass
