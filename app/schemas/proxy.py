from pydantic import BaseModel, ConfigDict, Field


class ChatRequest(BaseModel):
    """Request body for the chat proxy."""

    message: str = Field(min_length=1, description="User message forwarded to the chat deployment")


class ChatResponse(BaseModel):
    """Reply from the chat deployment."""

    reply: str


class ImageGenerationRequest(BaseModel):
    """Request body for the image generation proxy."""

    prompt: str = Field(min_length=1, description="Prompt forwarded to the image deployment")


class ImageGenerationResponse(BaseModel):
    """URL of the generated image."""

    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(alias="imageUrl")
