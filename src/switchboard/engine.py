"""Assembly of the orchestration engine from settings.

Both the HTTP app and the CLI build their runner here, so they share one
explicit configuration path.
"""

import logging

import httpx

from switchboard.agents import AgentRunner, RunConfig, RunMetrics, build_default_registry
from switchboard.config import SwitchboardSettings
from switchboard.ollama import OllamaAgentInvoker, OllamaClient

logger = logging.getLogger(__name__)


def create_http_client(settings: SwitchboardSettings) -> httpx.AsyncClient:
    """Create the HTTP client shared by side-effecting tools."""
    return httpx.AsyncClient(timeout=settings.tool_timeout_seconds)


def create_runner(
    settings: SwitchboardSettings,
    ollama_client: OllamaClient,
    http_client: httpx.AsyncClient,
    metrics: RunMetrics | None = None,
) -> AgentRunner:
    """Create an AgentRunner over the default agent catalog.

    Args:
        settings: Application settings
        ollama_client: Client used by specialist agents
        http_client: Client used by side-effecting tools
        metrics: Optional shared run counters

    Returns:
        AgentRunner: Runner with a frozen registry
    """
    if not settings.weather_api_key:
        logger.warning("SWITCHBOARD_WEATHER_API_KEY is not set; weather lookups will fail")

    registry = build_default_registry(
        http_client,
        weather_api_key=settings.weather_api_key,
        weather_api_url=settings.weather_api_url,
    )
    registry.freeze()
    invoker = OllamaAgentInvoker(ollama_client, default_model=settings.model)

    logger.info(
        f"Engine ready: {len(registry)} agents, model {settings.model}, "
        f"root agent {settings.root_agent}"
    )
    return AgentRunner(
        registry,
        invoker=invoker,
        config=RunConfig.from_settings(settings),
        metrics=metrics,
    )
