"""
Error taxonomy for the OCR and proxy services.

Every fatal failure is an ``OrchestratorError`` carrying the HTTP status the
API should answer with. ``TranslationUnavailable`` is the one exception that
never reaches the caller: the orchestrator downgrades it into a placeholder.
"""
from fastapi import status


class OrchestratorError(Exception):
    """Base class for fatal orchestration errors."""

    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_type: str = "orchestrator_error"

    def __init__(self, message: str, upstream_status: int | None = None):
        """
        Initialize the error.

        Args:
            message: Human readable description, safe to return to clients.
            upstream_status: HTTP status returned by the upstream service, if any.
        """
        super().__init__(message)
        self.message = message
        self.upstream_status = upstream_status


class ClientInputError(OrchestratorError):
    """The request did not carry a usable image."""

    http_status = status.HTTP_400_BAD_REQUEST
    error_type = "client_input_error"


class UpstreamProtocolError(OrchestratorError):
    """The upstream answered, but not in the shape we expect."""

    http_status = status.HTTP_502_BAD_GATEWAY
    error_type = "upstream_protocol_error"


class UpstreamFailureError(OrchestratorError):
    """The upstream reported a failure or could not be reached."""

    http_status = status.HTTP_502_BAD_GATEWAY
    error_type = "upstream_failure"


class OCRTimeoutError(OrchestratorError):
    """The OCR job did not finish within the poll attempt budget."""

    http_status = status.HTTP_504_GATEWAY_TIMEOUT
    error_type = "timeout"


class DeadlineExceededError(OCRTimeoutError):
    """The caller-side deadline expired before the orchestration finished."""

    error_type = "deadline_exceeded"


class ServiceNotConfiguredError(OrchestratorError):
    """Credentials or endpoints for an upstream service are missing."""

    http_status = status.HTTP_503_SERVICE_UNAVAILABLE
    error_type = "service_not_configured"


class TranslationUnavailable(Exception):
    """Translation failed; callers degrade instead of failing."""

    pass


def body_excerpt(text: str, limit: int = 500) -> str:
    """Trim an upstream response body for inclusion in error messages."""
    text = (text or "").strip()
    if len(text) > limit:
        return text[:limit] + "..."
    return text
