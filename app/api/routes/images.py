import logging

from fastapi import APIRouter, Depends

from app.api.deps import get_image_service
from app.schemas.proxy import ImageGenerationRequest, ImageGenerationResponse
from app.services.image_service import ImageGenerationService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Images"])


@router.post("/generate-image", response_model=ImageGenerationResponse)
async def generate_image(
    request: ImageGenerationRequest,
    image_service: ImageGenerationService = Depends(get_image_service),
):
    """Generate an image for a prompt and return its URL."""
    logger.info("Image generation request received")
    image_url = await image_service.generate(request.prompt)
    return ImageGenerationResponse(image_url=image_url)
