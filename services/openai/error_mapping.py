"""Translate OpenAI SDK failures into the application's error taxonomy."""

import openai

from utils.errors import AuthenticationError, CreauraError, ServiceError

INVALID_KEY_MESSAGE = "Invalid API Key. Please check your configuration."
_INVALID_KEY_MARKERS = ("api key not valid", "incorrect api key", "invalid api key", "invalid_api_key")


def is_credential_error(exc: BaseException) -> bool:
    """Return True when the failure means the configured API key was rejected."""
    if isinstance(exc, openai.AuthenticationError):
        return True
    message = str(exc).lower()
    return any(marker in message for marker in _INVALID_KEY_MARKERS)


def to_service_failure(exc: BaseException, action: str) -> CreauraError:
    """Classify an exception raised while calling the remote service.

    Args:
        exc: The exception caught at the call site.
        action: Short description used as a prefix, e.g. "analyze image style".

    Returns:
        An AuthenticationError for rejected credentials, the exception itself when it is
        already a taxonomy error, otherwise a ServiceError wrapping the underlying message.
    """
    if isinstance(exc, CreauraError):
        return exc
    if is_credential_error(exc):
        return AuthenticationError(INVALID_KEY_MESSAGE)
    detail = str(exc) or type(exc).__name__
    return ServiceError(f"Failed to {action}: {detail}")
