import logging
from typing import Callable

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse

from app.api.deps import get_orchestrator_factory, get_settings
from app.config import Settings
from app.errors import ClientInputError, OrchestratorError
from app.ocr.orchestrator import OCROrchestrator
from app.schemas.ocr import OCRErrorResponse, OCRTranslateResponse
from app.utils.file_validation import ValidationError, validate_image

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ocr", tags=["OCR"])


def ocr_error_response(error: OrchestratorError) -> JSONResponse:
    """Render a fatal error with every OCR result field present."""
    body = OCRErrorResponse(
        error=error.message,
        error_type=error.error_type,
        upstream_status=error.upstream_status,
    )
    return JSONResponse(status_code=error.http_status, content=body.model_dump(by_alias=True))


@router.post(
    "",
    response_model=OCRTranslateResponse,
    responses={
        400: {"model": OCRErrorResponse},
        502: {"model": OCRErrorResponse},
        503: {"model": OCRErrorResponse},
        504: {"model": OCRErrorResponse},
    },
)
async def ocr_translate(
    image: UploadFile | None = File(default=None, description="Image file to process"),
    lang: str | None = Form(default=None, description="Target language code (default: en)"),
    orchestrator_factory: Callable[[], OCROrchestrator] = Depends(get_orchestrator_factory),
    app_settings: Settings = Depends(get_settings),
):
    """
    Extract text from an image and translate it.

    The image is submitted to Azure Read, polled until analysis completes,
    and the extracted text is translated into `lang`. Translation failures
    do not fail the request; `translatedText` then holds a placeholder.
    """
    logger.info("OCR request received")

    try:
        if image is None:
            logger.info("No file uploaded")
            raise ClientInputError("No file uploaded")

        content = await image.read()
        logger.debug(f"Image details: {image.filename}, size: {len(content)}, language: {lang}")

        try:
            content_type = validate_image(content, max_size_mb=app_settings.max_image_mb)
        except ValidationError as e:
            raise ClientInputError(f"Invalid image file: {e}") from e

        orchestrator = orchestrator_factory()
        return await orchestrator.run(content, lang, content_type=content_type)

    except OrchestratorError as e:
        logger.error(f"OCR/Translation error ({e.error_type}): {e.message}")
        return ocr_error_response(e)
