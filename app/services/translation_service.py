import asyncio
import logging
from dataclasses import dataclass

import httpx

from app.config import TranslatorConfig
from app.errors import TranslationUnavailable
from app.schemas.ocr import (
    DEFAULT_TARGET_LANGUAGE,
    NO_TEXT_TO_TRANSLATE,
    TRANSLATION_UNAVAILABLE,
    TranslationStatus,
)

logger = logging.getLogger(__name__)


@dataclass
class TranslationResult:
    """Translated text or a placeholder explaining why there is none."""

    target_language: str
    text: str
    status: TranslationStatus


class TranslationService:
    """Service for translating text with Azure Translator."""

    def __init__(self, config: TranslatorConfig | None, client: httpx.AsyncClient):
        """
        Initialize the translation service.

        Args:
            config: Translator configuration. None means translation is not
                configured and every call reports it as unavailable.
            client: Shared HTTP client. Not closed by this class.
        """
        self.config = config
        self.client = client

    async def translate(self, text: str, target_language: str) -> str:
        """
        Translate text into the target language.

        Args:
            text: Source text, language auto-detected by the service.
            target_language: Target language code (e.g. 'en', 'de').

        Returns:
            The translated text.

        Raises:
            TranslationUnavailable: On missing configuration, transport errors,
                non-success status or a malformed response body.
        """
        if self.config is None:
            raise TranslationUnavailable("Translation credentials not configured")

        try:
            response = await self.client.post(
                self.config.translate_url,
                params={"api-version": self.config.api_version, "to": target_language},
                json=[{"Text": text}],
                headers={
                    "Ocp-Apim-Subscription-Key": self.config.key,
                    "Ocp-Apim-Subscription-Region": self.config.region,
                },
                timeout=self.config.request_timeout,
            )
        except httpx.RequestError as e:
            raise TranslationUnavailable(f"Translation request failed: {e.__class__.__name__}") from e

        if not response.is_success:
            raise TranslationUnavailable(f"Translation failed: {response.status_code}")

        try:
            data = response.json()
            translated = data[0]["translations"][0]["text"]
        except (ValueError, LookupError, TypeError) as e:
            raise TranslationUnavailable("Malformed translation response") from e

        if not isinstance(translated, str):
            raise TranslationUnavailable("Malformed translation response")

        logger.info(f"Translated {len(text)} chars to '{target_language}'")
        return translated

    async def translate_or_degrade(
        self,
        text: str,
        target_language: str | None,
        timeout: float | None = None,
    ) -> TranslationResult:
        """
        Translate text, substituting placeholders instead of failing.

        Blank text is never sent to the service. Any translation failure,
        including running past ``timeout`` seconds, is logged and reported
        as unavailable.
        """
        target_language = (target_language or "").strip() or DEFAULT_TARGET_LANGUAGE

        if not text or not text.strip():
            return TranslationResult(target_language, NO_TEXT_TO_TRANSLATE, TranslationStatus.SKIPPED)

        if timeout is not None and timeout <= 0:
            logger.warning("Translation unavailable: no time left before the deadline")
            return TranslationResult(target_language, TRANSLATION_UNAVAILABLE, TranslationStatus.UNAVAILABLE)

        try:
            translated = await asyncio.wait_for(self.translate(text, target_language), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Translation unavailable: no answer within {timeout:g}s")
            return TranslationResult(target_language, TRANSLATION_UNAVAILABLE, TranslationStatus.UNAVAILABLE)
        except TranslationUnavailable as e:
            logger.warning(f"Translation unavailable: {e}")
            return TranslationResult(target_language, TRANSLATION_UNAVAILABLE, TranslationStatus.UNAVAILABLE)

        return TranslationResult(target_language, translated, TranslationStatus.TRANSLATED)
