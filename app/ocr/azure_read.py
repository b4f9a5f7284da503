import logging

import httpx

from app.config import OCRConfig
from app.errors import UpstreamFailureError, UpstreamProtocolError, body_excerpt
from app.ocr.base import BaseReadClient, PollResponse, Submission

logger = logging.getLogger(__name__)

OPERATION_LOCATION_HEADER = "Operation-Location"
SUBSCRIPTION_KEY_HEADER = "Ocp-Apim-Subscription-Key"


class AzureReadClient(BaseReadClient):
    """
    Client for the Azure Computer Vision Read API (v3.2).

    The Read API is asynchronous: the analyze call answers 202 with an
    ``Operation-Location`` header, which is then polled until the
    analysis reaches a terminal status.
    """

    def __init__(self, config: OCRConfig, client: httpx.AsyncClient):
        """
        Initialize the client.

        Args:
            config: OCR configuration (endpoint, key, timeouts).
            client: Shared HTTP client. Not closed by this class.
        """
        self.config = config
        self.client = client

    @property
    def name(self) -> str:
        return "azure-read"

    async def submit(self, image: bytes, content_type: str = "application/octet-stream") -> Submission:
        """
        Send the image bytes to the analyze endpoint.

        The Read API sniffs the format itself, so the body always goes out as
        application/octet-stream and ``content_type`` is not forwarded.
        """
        try:
            response = await self.client.post(
                self.config.analyze_url,
                content=image,
                headers={
                    SUBSCRIPTION_KEY_HEADER: self.config.key,
                    "Content-Type": "application/octet-stream",
                },
                timeout=self.config.request_timeout,
            )
        except httpx.RequestError as e:
            logger.error(f"OCR submission could not reach {self.config.analyze_url}: {e!r}")
            raise UpstreamFailureError(f"OCR request failed: {e.__class__.__name__}") from e

        logger.info(f"OCR submission status: {response.status_code}")

        if not response.is_success:
            detail = body_excerpt(response.text)
            logger.error(f"OCR API error {response.status_code}: {detail}")
            raise UpstreamFailureError(
                f"OCR request failed: {response.status_code} {detail}",
                upstream_status=response.status_code,
            )

        operation_location = response.headers.get(OPERATION_LOCATION_HEADER)
        if not operation_location:
            raise UpstreamProtocolError(
                "No operation-location in OCR response",
                upstream_status=response.status_code,
            )

        logger.debug(f"OCR operation location: {operation_location}")
        return Submission(operation_location=operation_location, status_code=response.status_code)

    async def poll(self, operation_location: str) -> PollResponse:
        """Fetch the analysis status for a job handle."""
        try:
            response = await self.client.get(
                operation_location,
                headers={SUBSCRIPTION_KEY_HEADER: self.config.key},
                timeout=self.config.request_timeout,
            )
        except httpx.RequestError as e:
            logger.error(f"OCR polling could not reach the service: {e!r}")
            raise UpstreamFailureError(f"Polling failed: {e.__class__.__name__}") from e

        if not response.is_success:
            raise UpstreamFailureError(
                f"Polling failed: {response.status_code} {body_excerpt(response.text)}",
                upstream_status=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamProtocolError(
                "Polling response is not valid JSON",
                upstream_status=response.status_code,
            ) from e

        if not isinstance(payload, dict):
            raise UpstreamProtocolError(
                "Polling response is not a JSON object",
                upstream_status=response.status_code,
            )

        status = payload.get("status")
        return PollResponse(status=status if isinstance(status, str) else None, payload=payload)
