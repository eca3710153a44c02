"""FastAPI application factory and lifespan management.

This module contains the create_app() factory function that creates and configures
the FastAPI application instance, including lifespan management for startup/shutdown
and router registration.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from switchboard import __version__
from switchboard.config import SwitchboardSettings
from switchboard.engine import create_http_client, create_runner
from switchboard.ollama import OllamaClient
from switchboard.routers import agents, health, runs

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for FastAPI application.

    Expensive objects (the Ollama client, the tools' HTTP client and the
    runner with its frozen agent registry) are created once at startup and
    stored in app.state for reuse across all requests.

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control is yielded while the app is running.
    """
    settings: SwitchboardSettings = app.state.settings
    app.state.ollama_client = OllamaClient(host=settings.ollama_host)
    app.state.http_client = create_http_client(settings)
    app.state.runner = create_runner(
        settings, app.state.ollama_client, app.state.http_client
    )
    logger.info(f"Initialized Ollama client with host: {settings.ollama_host}")

    connected = await app.state.ollama_client.check_connection()
    if connected:
        logger.info("Successfully connected to Ollama")
    else:
        logger.warning("Could not connect to Ollama - check if server is running")

    yield

    await app.state.http_client.aclose()
    await app.state.ollama_client.close()
    logger.info("Clients closed")


def create_app(settings: SwitchboardSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional SwitchboardSettings instance. If not provided,
                  settings will be loaded from environment variables.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        from switchboard.dependencies import get_settings

        settings = get_settings()

    app = FastAPI(
        title="switchboard",
        description="Multi-agent orchestration server with streamed step events",
        version=__version__,
        lifespan=lifespan,
    )

    # Store settings in app.state for lifespan access
    app.state.settings = settings

    # Note: FastAPI's type hints for add_middleware are overly strict
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(agents.router)
    app.include_router(runs.router)

    return app
