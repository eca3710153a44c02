"""Dependency injection providers for FastAPI endpoints.

This module provides FastAPI dependency functions that are used across
multiple routers to inject common dependencies like settings and the runner.
"""

from functools import lru_cache

from fastapi import HTTPException, Request

from switchboard.agents import AgentRunner
from switchboard.config import SwitchboardSettings


@lru_cache
def get_settings() -> SwitchboardSettings:
    """Get the application settings instance.

    This function is cached so that the same settings instance is reused
    across all requests. Settings are loaded from environment variables
    with the SWITCHBOARD_ prefix.

    Returns:
        SwitchboardSettings: The application configuration settings.
    """
    return SwitchboardSettings()


def get_runner(request: Request) -> AgentRunner:
    """Get the AgentRunner from app state.

    Args:
        request: The FastAPI request object.

    Returns:
        AgentRunner: The runner created during application startup.

    Raises:
        HTTPException: If the runner is not initialized (503 Service Unavailable).
    """
    if not hasattr(request.app.state, "runner"):
        raise HTTPException(
            status_code=503,
            detail={
                "error": {
                    "code": "engine_unavailable",
                    "message": "Agent runner not initialized",
                    "details": {},
                }
            },
        )
    return request.app.state.runner
