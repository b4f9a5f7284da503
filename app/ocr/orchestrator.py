import asyncio
import logging

from app.config import OCRConfig
from app.errors import ClientInputError, DeadlineExceededError
from app.ocr.base import BaseReadClient
from app.ocr.extraction import extract_read_result
from app.ocr.polling import Sleep, poll_until_complete
from app.schemas.job import OCRJob
from app.schemas.ocr import DEFAULT_TARGET_LANGUAGE, NO_TEXT_FOUND, OCRTranslateResponse
from app.services.translation_service import TranslationService

logger = logging.getLogger(__name__)


class OCROrchestrator:
    """
    Drives image -> OCR submission -> polling -> extraction -> translation.

    One instance may serve many concurrent requests: every call to ``run``
    creates its own ``OCRJob`` and keeps no state on the orchestrator.
    """

    def __init__(
        self,
        config: OCRConfig,
        read_client: BaseReadClient,
        translation_service: TranslationService,
        sleep: Sleep = asyncio.sleep,
    ):
        """
        Initialize the orchestrator.

        Args:
            config: Polling and deadline settings.
            read_client: OCR service used for submission and polling.
            translation_service: Service used for the translation step.
            sleep: Awaitable sleep between polls, replaceable in tests.
        """
        self.config = config
        self.read_client = read_client
        self.translation_service = translation_service
        self.sleep = sleep

    async def run(
        self,
        image: bytes | None,
        target_language: str | None = DEFAULT_TARGET_LANGUAGE,
        content_type: str = "application/octet-stream",
    ) -> OCRTranslateResponse:
        """
        Extract text from an image and translate it.

        Args:
            image: Raw image bytes.
            target_language: Target language code, defaults to 'en' when blank.
            content_type: MIME type of the uploaded image, recorded on the job
                and in logs. The OCR service always receives
                application/octet-stream.

        Returns:
            OCRTranslateResponse with every field populated. Translation
            failures are reported through placeholders, not exceptions.

        Raises:
            ClientInputError: If no image was provided.
            UpstreamFailureError: If submission or polling fails.
            UpstreamProtocolError: If the OCR service answers in an unexpected shape.
            OCRTimeoutError: If the job does not finish within the poll budget.
            DeadlineExceededError: If the configured deadline expires before the
                text is extracted. Translation gets whatever time is left and
                degrades to unavailable when it runs out.
        """
        if not image:
            raise ClientInputError("No file uploaded")

        target_language = (target_language or "").strip() or DEFAULT_TARGET_LANGUAGE

        logger.info(
            f"OCR request via {self.read_client.name}: {len(image)} bytes ({content_type}), "
            f"target language '{target_language}'"
        )

        deadline_seconds = self.config.deadline_seconds
        if deadline_seconds is None:
            job = await self._recognize(image, content_type)
            translation = await self.translation_service.translate_or_degrade(job.extracted_text, target_language)
        else:
            loop = asyncio.get_running_loop()
            deadline = loop.time() + deadline_seconds
            try:
                job = await asyncio.wait_for(self._recognize(image, content_type), timeout=deadline_seconds)
            except asyncio.TimeoutError as e:
                logger.warning(f"OCR orchestration exceeded deadline of {deadline_seconds}s")
                raise DeadlineExceededError(f"OCR request exceeded deadline of {deadline_seconds:g}s") from e

            translation = await self.translation_service.translate_or_degrade(
                job.extracted_text,
                target_language,
                timeout=deadline - loop.time(),
            )

        return OCRTranslateResponse(
            extracted_text=job.extracted_text or NO_TEXT_FOUND,
            translated_text=translation.text,
            target_language=translation.target_language,
            translation_status=translation.status,
        )

    async def _recognize(self, image: bytes, content_type: str) -> OCRJob:
        """Submit the image, poll the job to completion and extract its text."""
        submission = await self.read_client.submit(image, content_type)
        job = OCRJob(
            operation_location=submission.operation_location,
            content_type=content_type,
            image_size=len(image),
        )

        response = await poll_until_complete(
            job,
            self.read_client.poll,
            interval=self.config.poll_interval,
            max_attempts=self.config.max_poll_attempts,
            unknown_status_policy=self.config.unknown_status_policy,
            sleep=self.sleep,
        )

        extraction = extract_read_result(response.payload)
        job.extracted_text = extraction.text
        if extraction.is_empty:
            logger.info("No text found in image")
        else:
            logger.info(f"Extracted {len(extraction.pages)} page(s), {len(job.extracted_text)} chars")
        return job
