"""
Domain-specific exception hierarchy for the MeetSync application.
"""


class MeetSyncError(Exception):
    """Base class for all application-level errors."""


class ValidationError(MeetSyncError):
    """Raised when required input is missing or malformed."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class InvalidInputError(ValidationError):
    """Raised when a date set or daily time window cannot produce slots."""


class MeetingNotFoundError(MeetSyncError):
    """Raised when no meeting exists for a code."""

    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"Meeting not found: {code}")


class CodeSpaceExhaustedError(MeetSyncError):
    """Raised when no free meeting code was found within the retry budget."""


class StorageError(MeetSyncError):
    """Raised when meetings cannot be read from or written to the store."""
