"""
prepflow Application Entry Point

This module creates and configures the FastAPI application instance.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI

from prepflow.config import Settings, get_settings
from prepflow.exceptions.handlers import register_exception_handlers
from prepflow.middleware.logging import LoggingMiddleware
from prepflow.preprocessing.client import PreprocessServiceClient
from prepflow.preprocessing.orchestrator import BatchOrchestrator
from prepflow.preprocessing.router import router as preprocess_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Log startup and close the execution-service client the app owns on shutdown.
    """
    settings: Settings = app.state.settings
    owned_client: Optional[PreprocessServiceClient] = app.state.owned_client
    logger.info(f"Starting {settings.APP_NAME} against {settings.PREPROCESS_SERVICE_URL}")

    yield

    if owned_client is not None:
        await owned_client.aclose()
    logger.info(f"{settings.APP_NAME} shutdown complete")


def create_app(
    settings: Optional[Settings] = None,
    orchestrator: Optional[BatchOrchestrator] = None,
) -> FastAPI:
    """
    FastAPI application factory.

    Returns:
        FastAPI: Configured FastAPI application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        description=settings.APP_DESCRIPTION,
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    # Injected orchestrators belong to the caller; only a client built here is closed
    app.state.owned_client = None
    if orchestrator is None:
        app.state.owned_client = PreprocessServiceClient(settings)
        orchestrator = BatchOrchestrator(app.state.owned_client)
    app.state.orchestrator = orchestrator

    app.add_middleware(LoggingMiddleware)
    app.include_router(preprocess_router)
    register_exception_handlers(app)

    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    settings.create_directories()
    settings.setup_logging()
    uvicorn.run(create_app(settings), host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
