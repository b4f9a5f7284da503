import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from app.api.deps import get_settings
from app.api.routes import chat, health, images, ocr
from app.config import REQUIRED_BY_SERVICE, Settings, settings
from app.errors import OrchestratorError

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info("Starting OCR & Translation API")

    for service in REQUIRED_BY_SERVICE:
        missing = settings.missing_for(service)
        if missing:
            logger.error(f"Missing environment variables for {service}: {missing}")
        else:
            logger.info(f"Service '{service}' configured")

    app.state.http_client = httpx.AsyncClient(timeout=settings.http_timeout)

    yield

    # Shutdown
    logger.info("Shutting down OCR & Translation API")
    await app.state.http_client.aclose()


app = FastAPI(
    title="OCR & Translation API",
    description="Azure Read OCR with translation, plus chat and image generation proxies",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(ocr.router)
app.include_router(chat.router)
app.include_router(images.router)


@app.exception_handler(OrchestratorError)
async def orchestrator_error_handler(request: Request, exc: OrchestratorError):
    """Render upstream and configuration errors raised outside route bodies."""
    logger.error(f"{request.url.path} failed ({exc.error_type}): {exc.message}")
    if request.url.path.startswith("/ocr"):
        return ocr.ocr_error_response(exc)
    return JSONResponse(
        status_code=exc.http_status,
        content={
            "error": exc.message,
            "errorType": exc.error_type,
            "upstreamStatus": exc.upstream_status,
        },
    )


@app.get("/", response_model=None)
async def root(app_settings: Settings = Depends(get_settings)):
    """Serve the bundled front page, or API information if there is none."""
    if app_settings.index_file.is_file():
        return FileResponse(app_settings.index_file)
    return {
        "name": "OCR & Translation API",
        "version": "1.0.0",
        "docs": "/docs",
    }
