"""Tool definition, validation and execution layer.

This package provides the ToolDefinition type, the ToolExecutor that validates
arguments and runs tools, and the built-in tools of the default catalog.
"""

from switchboard.tools.builtin import make_history_fun_fact_tool, make_weather_tool
from switchboard.tools.executor import ToolExecutor, format_tool_output
from switchboard.tools.types import NoParameters, ToolDefinition

__all__ = [
    "NoParameters",
    "ToolDefinition",
    "ToolExecutor",
    "format_tool_output",
    "make_history_fun_fact_tool",
    "make_weather_tool",
]
