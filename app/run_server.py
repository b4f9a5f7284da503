"""
Server entry point.

Logs which upstream services are configured, then serves the API with
uvicorn.
"""
import uvicorn

from app.config import settings


def report_configuration() -> None:
    """Print which upstream services have credentials before starting."""
    for service, configured in settings.configured_services().items():
        state = "configured" if configured else f"missing {settings.missing_for(service)}"
        print(f"[STARTUP] {service}: {state}", flush=True)


def main():
    """Run the API server."""
    report_configuration()

    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
