"""Unit tests for ToolExecutor."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import BaseModel

from switchboard.errors import (
    ErrorKind,
    InvalidArgumentsError,
    ToolExecutionError,
    ToolTransportError,
)
from switchboard.tools import ToolExecutor
from switchboard.tools.executor import format_tool_output
from switchboard.tools.types import ToolDefinition


class CityParameters(BaseModel):
    city: str
    days: int = 1


@pytest.fixture
def executor():
    return ToolExecutor()


class TestToolExecutor:
    """Tests for argument validation and executor dispatch."""

    @pytest.mark.asyncio
    async def test_invalid_arguments_skip_executor(self, executor):
        """Schema violations are reported before the executor runs."""
        fn = MagicMock(return_value="never")
        tool = ToolDefinition(
            name="forecast", description="Forecast", parameters=CityParameters, executor=fn
        )

        with pytest.raises(InvalidArgumentsError) as exc_info:
            await executor.execute(tool, {"days": "many"})

        assert fn.call_count == 0
        assert exc_info.value.kind == ErrorKind.INVALID_ARGUMENTS
        assert exc_info.value.tool_name == "forecast"
        assert exc_info.value.arguments == {"days": "many"}

    @pytest.mark.asyncio
    async def test_sync_executor_receives_validated_model(self, executor):
        fn = MagicMock(return_value={"ok": True})
        tool = ToolDefinition(
            name="forecast", description="Forecast", parameters=CityParameters, executor=fn
        )

        result = await executor.execute(tool, {"city": "Oslo"})

        assert result == {"ok": True}
        params = fn.call_args[0][0]
        assert isinstance(params, CityParameters)
        assert params.city == "Oslo"
        assert params.days == 1

    @pytest.mark.asyncio
    async def test_async_executor_is_awaited(self, executor):
        async def forecast(params: CityParameters) -> str:
            return f"sunny in {params.city}"

        tool = ToolDefinition(
            name="forecast",
            description="Forecast",
            parameters=CityParameters,
            executor=forecast,
        )

        assert await executor.execute(tool, {"city": "Rome"}) == "sunny in Rome"

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_wrapped(self, executor):
        tool = ToolDefinition(
            name="broken",
            description="Broken",
            executor=MagicMock(side_effect=KeyError("boom")),
        )

        with pytest.raises(ToolExecutionError) as exc_info:
            await executor.execute(tool, {})

        assert exc_info.value.tool_name == "broken"
        assert isinstance(exc_info.value.__cause__, KeyError)

    @pytest.mark.asyncio
    async def test_transport_error_keeps_context(self, executor):
        fn = AsyncMock(side_effect=ToolTransportError("down", status_code=503))
        tool = ToolDefinition(
            name="remote", description="Remote", parameters=CityParameters, executor=fn
        )

        with pytest.raises(ToolTransportError) as exc_info:
            await executor.execute(tool, {"city": "Lima"})

        assert exc_info.value.status_code == 503
        assert exc_info.value.tool_name == "remote"
        assert exc_info.value.arguments == {"city": "Lima"}

    @pytest.mark.asyncio
    async def test_none_result_is_an_error(self, executor):
        tool = ToolDefinition(
            name="empty", description="Empty", executor=MagicMock(return_value=None)
        )

        with pytest.raises(ToolExecutionError):
            await executor.execute(tool, {})


class TestToolDefinition:
    """Tests for the model-facing tool description."""

    def test_to_ollama_tool(self):
        tool = ToolDefinition(
            name="forecast",
            description="Forecast",
            parameters=CityParameters,
            executor=MagicMock(),
        )

        ollama_tool = tool.to_ollama_tool()

        assert ollama_tool["type"] == "function"
        assert ollama_tool["function"]["name"] == "forecast"
        params = ollama_tool["function"]["parameters"]
        assert "title" not in params
        assert params["required"] == ["city"]
        assert set(params["properties"]) == {"city", "days"}

    def test_no_parameters_schema_has_properties(self):
        tool = ToolDefinition(name="fact", description="Fact", executor=MagicMock())

        assert tool.json_schema()["properties"] == {}


def test_format_tool_output():
    assert format_tool_output("plain") == "plain"
    assert format_tool_output({"temp_c": 21}) == '{"temp_c": 21}'
    assert format_tool_output([1, 2]) == "[1, 2]"
