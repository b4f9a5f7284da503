from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass
class Submission:
    """Handle for an accepted OCR submission."""

    operation_location: str
    status_code: int = 202


@dataclass
class PollResponse:
    """One status report from the OCR service."""

    status: str | None
    payload: dict = field(default_factory=dict)


class BaseReadClient(ABC):
    """
    Abstract base class for asynchronous OCR services.

    Implementations talk to a submit-then-poll API: ``submit`` hands the
    image over and returns a job handle, ``poll`` reports the job's status
    for that handle.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Unique identifier for this OCR service.

        Returns:
            Service name (e.g., 'azure-read').
        """
        pass

    @abstractmethod
    async def submit(self, image: bytes, content_type: str = "application/octet-stream") -> Submission:
        """
        Submit an image for analysis.

        Args:
            image: Raw image bytes.
            content_type: MIME type of the uploaded image. Recorded for logging
                only; implementations may send the bytes under a fixed type.

        Returns:
            Submission carrying the job handle.

        Raises:
            UpstreamFailureError: If the service rejects the request or is unreachable.
            UpstreamProtocolError: If the service accepts without returning a handle.
        """
        pass

    @abstractmethod
    async def poll(self, operation_location: str) -> PollResponse:
        """
        Fetch the current status of a submitted job.

        Args:
            operation_location: Job handle returned by ``submit``.

        Returns:
            PollResponse with the raw status string and decoded body.

        Raises:
            UpstreamFailureError: On a non-success status or transport error.
            UpstreamProtocolError: If the body is not a JSON object.
        """
        pass
