"""Pytest configuration and shared fixtures for switchboard tests.

This module provides common fixtures used across all test modules,
including test app creation, async client setup and a scripted agent
invoker that replays canned agent responses.
"""

from typing import Callable, Sequence

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from switchboard import create_app
from switchboard.agents.types import (
    AgentDefinition,
    AgentResponse,
    AgentTurn,
    ConversationItem,
    Usage,
)
from switchboard.config import SwitchboardSettings
from switchboard.tools.types import ToolDefinition

ScriptStep = AgentResponse | Callable[[Sequence[ConversationItem]], AgentResponse]


class ScriptedInvoker:
    """AgentInvoker replaying a fixed script of responses per agent.

    Each script step is either a response or a callable receiving the
    history and returning a response. Every invocation is recorded in
    ``calls`` as (agent name, history snapshot).

    Args:
        scripts: Mapping of agent name to its ordered responses
        usage: Optional per-invocation usage, consumed in call order
    """

    def __init__(
        self,
        scripts: dict[str, list[ScriptStep]],
        usage: list[Usage] | None = None,
    ) -> None:
        self.scripts = {name: list(steps) for name, steps in scripts.items()}
        self.usage = list(usage or [])
        self.calls: list[tuple[str, tuple[ConversationItem, ...]]] = []

    async def invoke(
        self,
        agent: AgentDefinition,
        history: Sequence[ConversationItem],
        tools: Sequence[ToolDefinition],
        handoffs: Sequence[AgentDefinition],
    ) -> AgentTurn:
        self.calls.append((agent.name, tuple(history)))
        steps = self.scripts[agent.name]
        step = steps.pop(0) if len(steps) > 1 else steps[0]
        response = step(history) if callable(step) else step
        usage = self.usage.pop(0) if self.usage else Usage()
        return AgentTurn(response=response, usage=usage)


@pytest.fixture
def scripted_invoker():
    """Factory fixture returning the ScriptedInvoker class."""
    return ScriptedInvoker


@pytest.fixture
def test_settings():
    """Create test settings.

    Returns:
        SwitchboardSettings: Settings instance configured for testing.
    """
    return SwitchboardSettings(
        host="127.0.0.1",
        port=8000,
        ollama_host="http://localhost:11434",
        model="llama3.2:latest",
        weather_api_key="test-key",
        weather_api_url="https://weather.test/v1",
        log_level="DEBUG",
        cors_origins=["*"],
    )


@pytest.fixture
def test_app(test_settings):
    """Create a FastAPI test application instance.

    Args:
        test_settings: Test settings fixture.

    Returns:
        FastAPI: Configured test application.
    """
    return create_app(settings=test_settings)


@pytest_asyncio.fixture
async def async_client(test_app):
    """Create an async HTTP client for testing FastAPI endpoints.

    Args:
        test_app: Test application fixture.

    Yields:
        AsyncClient: Async HTTP client for making test requests.
    """
    # Trigger the lifespan startup manually for tests
    async with test_app.router.lifespan_context(test_app):
        transport = ASGITransport(app=test_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
