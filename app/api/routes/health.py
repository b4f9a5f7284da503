from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.api.deps import get_settings
from app.config import Settings

router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    services: dict[str, bool]


@router.get("/health", response_model=HealthResponse)
async def health_check(app_settings: Settings = Depends(get_settings)):
    """
    Check API health.

    Reports which upstream services have credentials configured. No
    upstream calls are made.
    """
    return HealthResponse(
        status="healthy",
        services=app_settings.configured_services(),
    )
