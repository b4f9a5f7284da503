import logging

import httpx

from app.config import ChatConfig
from app.errors import UpstreamFailureError, UpstreamProtocolError, body_excerpt

logger = logging.getLogger(__name__)

NO_REPLY = "No reply from Azure OpenAI"


class ChatService:
    """Service forwarding single chat messages to an Azure OpenAI deployment."""

    def __init__(self, config: ChatConfig, client: httpx.AsyncClient):
        self.config = config
        self.client = client

    async def reply(self, message: str) -> str:
        """
        Send one user message and return the assistant reply.

        Args:
            message: The user's message.

        Returns:
            The first choice's content, or a fixed placeholder if the
            deployment returned none.

        Raises:
            UpstreamFailureError: On transport errors or a non-success status.
            UpstreamProtocolError: If the body is not JSON.
        """
        try:
            response = await self.client.post(
                self.config.completions_url,
                json={
                    "messages": [{"role": "user", "content": message}],
                    "max_tokens": self.config.max_tokens,
                },
                headers={"api-key": self.config.key},
                timeout=self.config.request_timeout,
            )
        except httpx.RequestError as e:
            logger.error(f"Chat request failed: {e!r}")
            raise UpstreamFailureError(f"Chat request failed: {e.__class__.__name__}") from e

        if not response.is_success:
            logger.error(f"Chat API error {response.status_code}: {body_excerpt(response.text)}")
            raise UpstreamFailureError(
                f"Chat request failed: {response.status_code}",
                upstream_status=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamProtocolError("Chat response is not valid JSON", response.status_code) from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (LookupError, TypeError):
            content = None

        return content or NO_REPLY
