"""
Custom error classes for the application

Every error carries the HTTP status it is reported with, so the outermost
handler can render it without knowing where it was raised.
"""

from typing import Optional

import openai


class AssistantServiceError(Exception):
    """Base exception for assistant service errors"""
    status_code = 500
    default_message = "An error occurred while processing your request"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationError(AssistantServiceError):
    """Required credential or remote identifier is missing"""
    status_code = 500


class ValidationError(AssistantServiceError):
    """Required request field is missing"""
    status_code = 400


class NotFoundError(AssistantServiceError):
    """Unknown assistant key or session-scoped resource"""
    status_code = 404
    default_message = "Assistant not found"


class UpstreamAuthError(AssistantServiceError):
    """Remote service rejected the credential"""
    status_code = 401
    default_message = "Invalid API key"


class UpstreamRateLimitError(AssistantServiceError):
    """Remote service is throttling requests"""
    status_code = 429
    default_message = "Rate limit exceeded. Please try again later."


class RunFailureError(AssistantServiceError):
    """Run reached a failure-terminal status"""
    status_code = 500

    def __init__(self, status: str, detail: Optional[str] = None):
        self.status = status
        self.detail = detail or "Unknown error"
        super().__init__(f"Run {status}: {self.detail}")


class RunTimeoutError(AssistantServiceError):
    """Polling ceiling exhausted while the run was still pending"""
    status_code = 500
    default_message = "Run timeout - took too long to complete"


class DataLoadError(AssistantServiceError):
    """Context data files are unreadable or malformed"""
    status_code = 500


def classify_upstream_error(exc: Exception) -> AssistantServiceError:
    """
    Map an exception raised while talking to the remote service onto the
    service error taxonomy.

    Args:
        exc: Any exception raised during a request

    Returns:
        AssistantServiceError subclass instance to report to the caller
    """
    if isinstance(exc, AssistantServiceError):
        return exc

    status = getattr(exc, "status_code", None)
    if isinstance(exc, openai.AuthenticationError) or status == 401:
        return UpstreamAuthError()
    if isinstance(exc, openai.RateLimitError) or status == 429:
        return UpstreamRateLimitError()

    return AssistantServiceError(str(exc) or None)
