"""Built-in tools used by the default agent catalog."""

import logging
from typing import Any

import httpx
from pydantic import BaseModel, Field

from switchboard.errors import ToolExecutionError, ToolTransportError
from switchboard.tools.types import NoParameters, ToolDefinition

logger = logging.getLogger(__name__)

WEATHER_TOOL_NAME = "weather"
HISTORY_FUN_FACT_TOOL_NAME = "history_fun_fact"

DEFAULT_WEATHER_API_URL = "https://api.weatherapi.com/v1"


class WeatherParameters(BaseModel):
    """Parameters of the weather tool."""

    location: str = Field(
        ..., min_length=1, description="The location to get the weather for"
    )


def make_weather_tool(
    http_client: httpx.AsyncClient,
    api_key: str,
    base_url: str = DEFAULT_WEATHER_API_URL,
) -> ToolDefinition:
    """Create the weather tool bound to an HTTP client.

    The tool queries the weatherapi.com current-conditions endpoint. Non-2xx
    answers and connection problems raise ToolTransportError; a 2xx answer
    whose body is not a JSON object raises ToolExecutionError.

    Args:
        http_client: Shared async HTTP client
        api_key: weatherapi.com API key
        base_url: Base URL of the weather API

    Returns:
        ToolDefinition: The side-effecting weather tool
    """
    url = f"{base_url.rstrip('/')}/current.json"

    async def get_weather(params: WeatherParameters) -> dict[str, Any]:
        logger.info(f"Looking up weather for {params.location}")
        try:
            response = await http_client.get(
                url, params={"key": api_key, "q": params.location}
            )
        except httpx.HTTPError as e:
            raise ToolTransportError(
                f"Weather API request failed: {e}",
                tool_name=WEATHER_TOOL_NAME,
            ) from e

        if not response.is_success:
            body = response.text
            raise ToolTransportError(
                f"Weather API error ({response.status_code}): "
                f"{body or response.reason_phrase}",
                status_code=response.status_code,
                body=body,
                tool_name=WEATHER_TOOL_NAME,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ToolExecutionError(
                "Weather API returned invalid JSON", tool_name=WEATHER_TOOL_NAME
            ) from e

        if not isinstance(data, dict) or not data:
            raise ToolExecutionError(
                "Weather API returned an empty result", tool_name=WEATHER_TOOL_NAME
            )
        return data

    return ToolDefinition(
        name=WEATHER_TOOL_NAME,
        description="Get the weather for a given location",
        parameters=WeatherParameters,
        executor=get_weather,
        side_effecting=True,
    )


def history_fun_fact(params: NoParameters) -> str:
    """Return a fun fact about a historical event."""
    return "Sharks are older than trees."


def make_history_fun_fact_tool() -> ToolDefinition:
    """Create the pure history fun-fact tool."""
    return ToolDefinition(
        name=HISTORY_FUN_FACT_TOOL_NAME,
        description="Give a fun fact about a historical event",
        executor=history_fun_fact,
    )
