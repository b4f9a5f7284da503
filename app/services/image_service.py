import logging

import httpx

from app.config import ImageGenerationConfig
from app.errors import UpstreamFailureError, UpstreamProtocolError, body_excerpt

logger = logging.getLogger(__name__)


class ImageGenerationService:
    """Service forwarding prompts to an Azure OpenAI image deployment."""

    def __init__(self, config: ImageGenerationConfig, client: httpx.AsyncClient):
        self.config = config
        self.client = client

    async def generate(self, prompt: str) -> str:
        """
        Generate one image for a prompt.

        Args:
            prompt: Text description of the image.

        Returns:
            URL of the generated image.

        Raises:
            UpstreamFailureError: On transport errors or a non-success status.
            UpstreamProtocolError: If the response carries no image URL.
        """
        logger.info(f"Generating image for prompt of {len(prompt)} chars")

        try:
            response = await self.client.post(
                self.config.generations_url,
                json={"prompt": prompt, "size": self.config.size, "n": 1},
                headers={"api-key": self.config.key},
                timeout=self.config.request_timeout,
            )
        except httpx.RequestError as e:
            logger.error(f"Image generation request failed: {e!r}")
            raise UpstreamFailureError(f"Image generation failed: {e.__class__.__name__}") from e

        if not response.is_success:
            detail = body_excerpt(response.text)
            logger.error(f"Image API error {response.status_code}: {detail}")
            raise UpstreamFailureError(
                f"Image generation failed: {response.status_code} {detail}",
                upstream_status=response.status_code,
            )

        try:
            image_url = response.json()["data"][0]["url"]
        except (ValueError, LookupError, TypeError) as e:
            raise UpstreamProtocolError("No image URL in response", response.status_code) from e

        if not image_url:
            raise UpstreamProtocolError("No image URL in response", response.status_code)

        return image_url
