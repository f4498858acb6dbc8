"""FastAPI dependencies for the preprocessing step."""

from fastapi import Request

from prepflow.config import Settings, get_settings

from .orchestrator import BatchOrchestrator


def get_app_settings(request: Request) -> Settings:
    """Settings the app was created with, falling back to the environment."""
    return getattr(request.app.state, "settings", None) or get_settings()


async def get_orchestrator(request: Request) -> BatchOrchestrator:
    """
    Shared orchestrator stored on the application by ``create_app``.

    One instance per app so the single in-flight submission rule holds
    across requests.
    """
    return request.app.state.orchestrator
