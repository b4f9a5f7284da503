import logging
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from app.errors import ServiceNotConfiguredError

logger = logging.getLogger(__name__)

# Settings fields each upstream service needs before it can be called
REQUIRED_BY_SERVICE: dict[str, tuple[str, ...]] = {
    "ocr": ("azure_vision_endpoint", "azure_vision_key"),
    "translator": ("azure_translator_key", "azure_region"),
    "chat": ("azure_openai_endpoint", "azure_openai_api_key", "azure_openai_deployment"),
    "image": ("azure_openai_image_endpoint", "azure_openai_image_key", "azure_openai_image_deployment"),
}


class OCRConfig(BaseModel):
    """Configuration for the Azure Read (OCR) orchestrator."""

    endpoint: str = Field(description="Azure Computer Vision endpoint, e.g. https://<name>.cognitiveservices.azure.com")
    key: str = Field(description="Subscription key for the vision resource")
    api_path: str = Field(default="/vision/v3.2/read/analyze", description="Path of the Read submission endpoint")
    poll_interval: float = Field(default=1.0, ge=0.0, description="Seconds to wait before each poll")
    max_poll_attempts: int = Field(default=30, ge=1, le=300, description="Poll attempts before giving up")
    unknown_status_policy: Literal["error", "continue"] = Field(
        default="error", description="How to treat poll statuses we do not recognize"
    )
    deadline_seconds: float | None = Field(
        default=None, gt=0, description="Upper bound for one whole orchestration (None = no deadline)"
    )
    request_timeout: float = Field(default=30.0, gt=0, description="Per-request HTTP timeout in seconds")

    model_config = {"frozen": True}

    @property
    def analyze_url(self) -> str:
        return f"{self.endpoint.rstrip('/')}{self.api_path}"


class TranslatorConfig(BaseModel):
    """Configuration for Azure Translator."""

    endpoint: str = "https://api.cognitive.microsofttranslator.com"
    key: str
    region: str
    api_version: str = "3.0"
    request_timeout: float = Field(default=30.0, gt=0)

    model_config = {"frozen": True}

    @property
    def translate_url(self) -> str:
        return f"{self.endpoint.rstrip('/')}/translate"


class ChatConfig(BaseModel):
    """Configuration for the Azure OpenAI chat deployment."""

    endpoint: str
    key: str
    deployment: str
    api_version: str = "2024-02-15-preview"
    max_tokens: int = Field(default=200, gt=0)
    request_timeout: float = Field(default=60.0, gt=0)

    model_config = {"frozen": True}

    @property
    def completions_url(self) -> str:
        return (
            f"{self.endpoint.rstrip('/')}/openai/deployments/{self.deployment}"
            f"/chat/completions?api-version={self.api_version}"
        )


class ImageGenerationConfig(BaseModel):
    """Configuration for the Azure OpenAI image (DALL-E) deployment."""

    endpoint: str
    key: str
    deployment: str
    api_version: str = "2024-02-01"
    size: str = "1024x1024"
    request_timeout: float = Field(default=120.0, gt=0)

    model_config = {"frozen": True}

    @property
    def generations_url(self) -> str:
        return (
            f"{self.endpoint.rstrip('/')}/openai/deployments/{self.deployment}"
            f"/images/generations?api-version={self.api_version}"
        )


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Settings
    api_host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False
    cors_origins: list[str] = ["*"]
    max_image_mb: int = 20
    http_timeout: float = 30.0
    index_file: Path = Path("index.html")

    # Azure Computer Vision (Read API)
    azure_vision_endpoint: str = ""
    azure_vision_key: str = ""

    # Azure Translator
    azure_translator_key: str = ""
    azure_region: str = ""
    azure_translator_endpoint: str = "https://api.cognitive.microsofttranslator.com"

    # Azure OpenAI chat
    azure_openai_endpoint: str = ""
    azure_openai_api_key: str = ""
    azure_openai_deployment: str = ""
    azure_openai_api_version: str = "2024-02-15-preview"

    # Azure OpenAI image generation
    azure_openai_image_endpoint: str = ""
    azure_openai_image_key: str = ""
    azure_openai_image_deployment: str = ""
    azure_openai_image_api_version: str = "2024-02-01"

    # OCR polling
    ocr_poll_interval: float = 1.0
    ocr_max_poll_attempts: int = 30
    ocr_unknown_status_policy: Literal["error", "continue"] = "error"
    ocr_deadline_seconds: float | None = None

    def missing_for(self, service: str) -> list[str]:
        """Return the environment variable names a service is missing."""
        return [
            name.upper()
            for name in REQUIRED_BY_SERVICE[service]
            if not getattr(self, name)
        ]

    def configured_services(self) -> dict[str, bool]:
        """Map each upstream service to whether its credentials are present."""
        return {service: not self.missing_for(service) for service in REQUIRED_BY_SERVICE}

    def _require(self, service: str, label: str) -> None:
        missing = self.missing_for(service)
        if missing:
            logger.debug(f"[Config] {label} requested but missing: {missing}")
            raise ServiceNotConfiguredError(f"{label} credentials not configured: {', '.join(missing)}")

    def get_ocr_config(self) -> OCRConfig:
        """Build the OCR orchestrator configuration."""
        self._require("ocr", "Azure Vision")
        return OCRConfig(
            endpoint=self.azure_vision_endpoint,
            key=self.azure_vision_key,
            poll_interval=self.ocr_poll_interval,
            max_poll_attempts=self.ocr_max_poll_attempts,
            unknown_status_policy=self.ocr_unknown_status_policy,
            deadline_seconds=self.ocr_deadline_seconds,
            request_timeout=self.http_timeout,
        )

    def get_translator_config(self) -> TranslatorConfig | None:
        """
        Build the translator configuration.

        Returns None when translation is not configured; the orchestrator
        then reports translation as unavailable instead of failing.
        """
        if self.missing_for("translator"):
            return None
        return TranslatorConfig(
            endpoint=self.azure_translator_endpoint,
            key=self.azure_translator_key,
            region=self.azure_region,
            request_timeout=self.http_timeout,
        )

    def get_chat_config(self) -> ChatConfig:
        """Build the chat completion configuration."""
        self._require("chat", "Azure OpenAI")
        return ChatConfig(
            endpoint=self.azure_openai_endpoint,
            key=self.azure_openai_api_key,
            deployment=self.azure_openai_deployment,
            api_version=self.azure_openai_api_version,
        )

    def get_image_config(self) -> ImageGenerationConfig:
        """Build the image generation configuration."""
        self._require("image", "Azure OpenAI image")
        return ImageGenerationConfig(
            endpoint=self.azure_openai_image_endpoint,
            key=self.azure_openai_image_key,
            deployment=self.azure_openai_image_deployment,
            api_version=self.azure_openai_image_api_version,
        )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
