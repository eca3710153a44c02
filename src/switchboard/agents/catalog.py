"""Default agent catalog: an orchestrator delegating to history and weather specialists."""

import httpx

from switchboard.agents.registry import AgentRegistry
from switchboard.agents.router import KeywordDecision, RouterInvoker
from switchboard.agents.types import AgentDefinition
from switchboard.tools.builtin import (
    DEFAULT_WEATHER_API_URL,
    HISTORY_FUN_FACT_TOOL_NAME,
    WEATHER_TOOL_NAME,
    make_history_fun_fact_tool,
    make_weather_tool,
)

ORCHESTRATOR_NAME = "Orchestrator"
HISTORY_AGENT_NAME = "History Agent"
WEATHER_AGENT_NAME = "Weather Agent"

HISTORY_KEYWORDS = (
    "history",
    "historical",
    "historic",
    "when did",
    "first appear",
    "fun fact",
    "fact",
    "ancient",
    "century",
    "war",
    "empire",
    "invented",
    "origin",
    "event",
)

WEATHER_KEYWORDS = (
    "weather",
    "temperature",
    "forecast",
    "rain",
    "snow",
    "sunny",
    "wind",
    "humidity",
    "degrees",
)

ORCHESTRATOR_INSTRUCTIONS = """You are an observer and planner. You receive the user's request and decide which specialist agent should handle it.

- For history-related requests (fun facts, historical events, "when did X happen", etc.): use the handoff to transfer to History Agent.
- For weather-related requests ("weather in X", "what's the temperature in X", "forecast for X"): use the handoff to transfer to Weather Agent.
- Do not answer the question yourself. Always delegate to the appropriate specialist by calling the handoff. If the request is unclear or mixes topics, pick the most relevant specialist."""


def build_default_registry(
    http_client: httpx.AsyncClient,
    weather_api_key: str,
    weather_api_url: str = DEFAULT_WEATHER_API_URL,
) -> AgentRegistry:
    """Build the registry used by the server and the CLI.

    History Agent is registered before Weather Agent, so it wins routing ties
    and is the fallback when no keyword matches.

    Args:
        http_client: Shared HTTP client for the weather tool
        weather_api_key: weatherapi.com API key
        weather_api_url: Base URL of the weather API

    Returns:
        AgentRegistry: Registry with the orchestrator and both specialists
    """
    registry = AgentRegistry()
    registry.register_tool(make_history_fun_fact_tool())
    registry.register_tool(
        make_weather_tool(http_client, weather_api_key, base_url=weather_api_url)
    )

    registry.register(
        AgentDefinition(
            name=HISTORY_AGENT_NAME,
            instructions=(
                "You provide assistance with historical queries. Explain important "
                "events and context clearly. Use the history_fun_fact tool when the "
                "user wants a fun history fact."
            ),
            tools=(HISTORY_FUN_FACT_TOOL_NAME,),
            handoff_description=(
                "Hand off here for history questions, fun facts about history, "
                "historical events, or when the user asks for a history fact."
            ),
        )
    )
    registry.register(
        AgentDefinition(
            name=WEATHER_AGENT_NAME,
            instructions=(
                "You help with weather. Use the weather tool to get current "
                "conditions for the location the user asks about. Reply with a "
                "clear, friendly summary."
            ),
            tools=(WEATHER_TOOL_NAME,),
            handoff_description=(
                "Hand off here for weather questions: current weather, forecast, "
                "or when the user asks about weather in a location."
            ),
        )
    )
    registry.register(
        AgentDefinition(
            name=ORCHESTRATOR_NAME,
            instructions=ORCHESTRATOR_INSTRUCTIONS,
            handoffs=(HISTORY_AGENT_NAME, WEATHER_AGENT_NAME),
            invoker=RouterInvoker(
                KeywordDecision(
                    {
                        HISTORY_AGENT_NAME: HISTORY_KEYWORDS,
                        WEATHER_AGENT_NAME: WEATHER_KEYWORDS,
                    }
                )
            ),
        )
    )
    return registry
