"""FastAPI dependencies wiring configuration and HTTP clients into services."""
from typing import Callable

import httpx
from fastapi import Depends, Request

from app.config import Settings, settings
from app.ocr.azure_read import AzureReadClient
from app.ocr.orchestrator import OCROrchestrator
from app.services.chat_service import ChatService
from app.services.image_service import ImageGenerationService
from app.services.translation_service import TranslationService


def get_settings() -> Settings:
    """Get application settings for dependency injection."""
    return settings


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Get the shared HTTP client opened by the application lifespan."""
    return request.app.state.http_client


def get_translation_service(
    app_settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> TranslationService:
    return TranslationService(app_settings.get_translator_config(), client)


def get_orchestrator_factory(
    app_settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
    translation_service: TranslationService = Depends(get_translation_service),
) -> Callable[[], OCROrchestrator]:
    """
    Get a builder for the OCR orchestrator.

    The Vision configuration is resolved only when the builder is called,
    so requests without an image are rejected before credentials are checked.
    The builder raises ServiceNotConfiguredError if Vision is not configured.
    """

    def build() -> OCROrchestrator:
        config = app_settings.get_ocr_config()
        return OCROrchestrator(
            config=config,
            read_client=AzureReadClient(config, client),
            translation_service=translation_service,
        )

    return build


def get_chat_service(
    app_settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> ChatService:
    return ChatService(app_settings.get_chat_config(), client)


def get_image_service(
    app_settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> ImageGenerationService:
    return ImageGenerationService(app_settings.get_image_config(), client)
