from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

NO_TEXT_FOUND = "No text found in image"
NO_TEXT_TO_TRANSLATE = "No text to translate"
TRANSLATION_UNAVAILABLE = "Translation service unavailable"
OCR_FAILED = "OCR processing failed"
TRANSLATION_FAILED = "Translation failed"

DEFAULT_TARGET_LANGUAGE = "en"


class TranslationStatus(str, Enum):
    """Outcome of the translation step."""

    TRANSLATED = "translated"
    SKIPPED = "skipped"  # no text to translate
    UNAVAILABLE = "unavailable"  # translation call failed


class OCRTranslateResponse(BaseModel):
    """Result of an OCR + translation request. Every field is always set."""

    model_config = ConfigDict(populate_by_name=True)

    extracted_text: str = Field(alias="extractedText")
    translated_text: str = Field(alias="translatedText")
    target_language: str = Field(default=DEFAULT_TARGET_LANGUAGE, alias="targetLanguage")
    translation_status: TranslationStatus = Field(alias="translationStatus")


class OCRErrorResponse(BaseModel):
    """Body returned for fatal orchestration errors."""

    model_config = ConfigDict(populate_by_name=True)

    error: str
    error_type: str = Field(alias="errorType")
    upstream_status: int | None = Field(default=None, alias="upstreamStatus")
    extracted_text: str = Field(default=OCR_FAILED, alias="extractedText")
    translated_text: str = Field(default=TRANSLATION_FAILED, alias="translatedText")
