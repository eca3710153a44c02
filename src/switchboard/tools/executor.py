"""Tool execution service.

Validates tool arguments against the declared parameter schema and invokes the
tool's executor. The executor never retries; what happens after a failure is
decided by the run loop and the calling agent.
"""

import asyncio
import inspect
import json
import logging
from typing import Any

from pydantic import ValidationError

from switchboard.errors import (
    InvalidArgumentsError,
    SwitchboardError,
    ToolExecutionError,
)
from switchboard.tools.types import ToolDefinition

logger = logging.getLogger(__name__)


def format_tool_output(result: Any) -> str:
    """Normalise a tool result to the text stored in the conversation.

    Strings pass through unchanged, everything else is serialized as JSON.

    Args:
        result: The raw value returned by a tool executor

    Returns:
        str: Text representation of the result
    """
    if isinstance(result, str):
        return result
    try:
        return json.dumps(result, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return str(result)


class ToolExecutor:
    """Executes tools on behalf of agents.

    Sync executors are run in a worker thread so they never block the event
    loop; async executors are awaited directly.
    """

    async def execute(self, tool: ToolDefinition, arguments: dict[str, Any]) -> Any:
        """Validate arguments and run a tool.

        Args:
            tool: The tool to run
            arguments: Raw arguments as requested by the agent

        Returns:
            Any: Whatever the tool's executor returned

        Raises:
            InvalidArgumentsError: If arguments do not match the schema; the
                executor is not invoked in that case
            ToolTransportError: If a side-effecting tool failed to reach its
                remote service (raised by the tool itself)
            ToolExecutionError: For any other failure inside the tool
        """
        try:
            params = tool.parameters.model_validate(arguments)
        except ValidationError as e:
            logger.warning(f"Invalid arguments for tool {tool.name}: {arguments}")
            raise InvalidArgumentsError(
                f"Invalid arguments for tool '{tool.name}': {e.errors(include_url=False)}",
                tool_name=tool.name,
                arguments=arguments,
            ) from e

        logger.debug(f"Executing tool {tool.name} with {params.model_dump()}")

        try:
            if inspect.iscoroutinefunction(tool.executor):
                result = await tool.executor(params)
            else:
                result = await asyncio.to_thread(tool.executor, params)
                if inspect.isawaitable(result):
                    result = await result
        except SwitchboardError as e:
            e.tool_name = e.tool_name or tool.name
            e.arguments = e.arguments if e.arguments is not None else arguments
            raise
        except Exception as e:
            logger.error(f"Tool {tool.name} failed: {e}")
            raise ToolExecutionError(
                f"Tool '{tool.name}' failed: {e}",
                tool_name=tool.name,
                arguments=arguments,
            ) from e

        if result is None:
            raise ToolExecutionError(
                f"Tool '{tool.name}' returned no result",
                tool_name=tool.name,
                arguments=arguments,
            )

        logger.debug(f"Tool {tool.name} completed")
        return result
