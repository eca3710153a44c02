"""Type definitions for tools.

A tool is an injected function an agent may ask the run loop to execute on its
behalf. Its parameter schema is a pydantic model class, which doubles as the
JSON schema handed to the model backend.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from pydantic import BaseModel

# Executors receive the validated parameter model and return any result.
ToolExecutorFn = Callable[[BaseModel], Any | Awaitable[Any]]


class NoParameters(BaseModel):
    """Parameter schema for tools that take no arguments."""


@dataclass(frozen=True)
class ToolDefinition:
    """Definition of a tool an agent can call.

    Attributes:
        name: Unique tool name (as seen by the model)
        description: What the tool does, shown to the model
        parameters: Pydantic model class describing the expected input
        executor: Callable (sync or async) invoked with validated parameters
        side_effecting: True for tools that reach outside the process
                        (e.g. HTTP calls); transport failures of such tools
                        end the run instead of being handed back to the agent
    """

    name: str
    description: str
    executor: ToolExecutorFn
    parameters: type[BaseModel] = NoParameters
    side_effecting: bool = False

    def json_schema(self) -> dict[str, Any]:
        """Get the JSON schema of the tool's parameters."""
        schema = self.parameters.model_json_schema()
        schema.pop("title", None)
        schema.setdefault("properties", {})
        return schema

    def to_ollama_tool(self) -> dict[str, Any]:
        """Convert the tool to the function-tool format Ollama expects.

        Returns:
            dict: {"type": "function", "function": {name, description, parameters}}
        """
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.json_schema(),
            },
        }
