"""Custom exceptions for Divify."""


class DivifyError(Exception):
    """Base exception for all Divify errors."""

    pass


class ConfigurationError(DivifyError):
    """Raised when configuration is invalid or missing."""

    pass


class InvalidParticipantError(DivifyError):
    """Raised when a participant entry cannot be understood."""

    pass


class DuplicateParticipantError(InvalidParticipantError):
    """Raised when two participants share the same name."""

    def __init__(self, name: str, message: str | None = None):
        self.name = name
        super().__init__(
            message or f"Participant '{name}' appears more than once in the group"
        )


class SettlementMismatchError(DivifyError):
    """Raised when transactions don't balance out the computed balances."""

    pass


class ExportError(DivifyError):
    """Raised when a settlement report cannot be written."""

    pass
