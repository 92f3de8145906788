"""Error taxonomy shared by the remote clients and the session state machine."""

from __future__ import annotations


class CreauraError(Exception):
    """Base class for every user-facing failure raised by the application."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(CreauraError):
    """A required setting (the API key) is missing at startup."""

    kind = "configuration"


class AuthenticationError(CreauraError):
    """The remote service rejected the configured credential."""

    kind = "authentication"


class ServiceError(CreauraError):
    """Any other failure reported by, or while reaching, the remote service."""

    kind = "service"


class EmptyResultError(CreauraError):
    """The synthesis call succeeded but produced no image data."""

    kind = "empty_result"


class ValidationError(CreauraError):
    """The user asked for something the current session state does not allow."""

    kind = "validation"
