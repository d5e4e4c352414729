# notecore/main.py
"""
FastAPI application with service lifecycle management.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from notecore.config import settings
from notecore.container import ServiceContainer, build_services
from notecore.infrastructure.observability.logging import get_logger, log_request, setup_logging
from notecore.routes import analysis, autosave, health, llm, preferences

# Setup logging before creating the app
setup_logging(log_level=settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build services on startup and shut them down in reverse order."""
    logger.info("Application starting", environment=settings.environment, debug=settings.debug)

    services = app.state.services or build_services()
    app.state.services = services

    try:
        await services.startup()
    except Exception as e:
        logger.error("Failed to initialize services", error=str(e))
        await services.shutdown()
        raise

    if services.config.AUTOSAVE_ENABLED:
        services.autosave.start()

    yield

    logger.info("Application shutting down")
    await services.shutdown()


async def log_requests(request: Request, call_next):
    """Log HTTP requests with timing."""
    start_time = time.time()
    response = await call_next(request)
    process_time = (time.time() - start_time) * 1000

    log_request(request.method, request.url.path, response.status_code, round(process_time, 2))
    return response


def create_app(services: ServiceContainer | None = None) -> FastAPI:
    """Create the API; pre-built services are used as-is (tests inject fakes)."""
    application = FastAPI(
        title="Note Assistant Core",
        description="Text intelligence and auto-save engine for the note assistant",
        version="0.1.0",
        lifespan=lifespan,
    )
    application.state.services = services

    application.middleware("http")(log_requests)

    # Include routers
    application.include_router(health.router)
    application.include_router(analysis.router)
    application.include_router(autosave.router)
    application.include_router(preferences.router)
    application.include_router(llm.router)
    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
