"""Error taxonomy for switchboard.

Setup errors (duplicate names, unknown agents or tools, a frozen registry) are
raised straight to the caller. Run-time errors are raised inside the run loop
and converted into a structured RunError on the terminal event, so they never
escape the event stream.
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Kinds of errors a setup step or a run can end with."""

    DUPLICATE_NAME = "duplicate_name"
    UNKNOWN_AGENT = "unknown_agent"
    UNKNOWN_TOOL = "unknown_tool"
    REGISTRY_FROZEN = "registry_frozen"
    INVALID_HANDOFF = "invalid_handoff"
    HANDOFF_LIMIT_EXCEEDED = "handoff_limit_exceeded"
    MAX_TURNS_EXCEEDED = "max_turns_exceeded"
    INVALID_ARGUMENTS = "invalid_arguments"
    TOOL_EXECUTION_ERROR = "tool_execution_error"
    TOOL_TRANSPORT_ERROR = "tool_transport_error"
    AGENT_INVOCATION_ERROR = "agent_invocation_error"
    CANCELLED = "cancelled"


class SwitchboardError(Exception):
    """Base class for all switchboard errors.

    Attributes:
        kind: The taxonomy kind of this error
        agent_name: Agent that was active when the error occurred (if any)
        tool_name: Tool involved in the error (if any)
        arguments: Tool arguments involved in the error (if any)
    """

    kind: ErrorKind = ErrorKind.AGENT_INVOCATION_ERROR

    def __init__(
        self,
        message: str,
        *,
        agent_name: str | None = None,
        tool_name: str | None = None,
        arguments: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.agent_name = agent_name
        self.tool_name = tool_name
        self.arguments = arguments


class DuplicateNameError(SwitchboardError):
    """An agent or tool with the same name is already registered."""

    kind = ErrorKind.DUPLICATE_NAME


class UnknownAgentError(SwitchboardError):
    """The requested agent is not registered."""

    kind = ErrorKind.UNKNOWN_AGENT


class UnknownToolError(SwitchboardError):
    """The requested tool is not registered or not allowed for the agent."""

    kind = ErrorKind.UNKNOWN_TOOL


class RegistryFrozenError(SwitchboardError):
    """The registry was modified after setup ended."""

    kind = ErrorKind.REGISTRY_FROZEN


class InvalidHandoffError(SwitchboardError):
    """A handoff named a target outside the active agent's handoff set."""

    kind = ErrorKind.INVALID_HANDOFF


class HandoffLimitExceededError(SwitchboardError):
    """A run exceeded the maximum number of handoffs."""

    kind = ErrorKind.HANDOFF_LIMIT_EXCEEDED


class MaxTurnsExceededError(SwitchboardError):
    """A run exceeded the maximum number of agent turns."""

    kind = ErrorKind.MAX_TURNS_EXCEEDED


class InvalidArgumentsError(SwitchboardError):
    """Tool arguments did not match the tool's parameter schema."""

    kind = ErrorKind.INVALID_ARGUMENTS


class ToolExecutionError(SwitchboardError):
    """A tool ran but failed logically (empty or invalid result)."""

    kind = ErrorKind.TOOL_EXECUTION_ERROR


class ToolTransportError(SwitchboardError):
    """A side-effecting tool failed to reach its remote service.

    Attributes:
        status_code: HTTP status code, when the remote answered
        body: Response body text, when available
    """

    kind = ErrorKind.TOOL_TRANSPORT_ERROR

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        body: str | None = None,
        **context: Any,
    ) -> None:
        super().__init__(message, **context)
        self.status_code = status_code
        self.body = body


class AgentInvocationError(SwitchboardError):
    """The agent's underlying model or decision function failed."""

    kind = ErrorKind.AGENT_INVOCATION_ERROR


class CancelledRunError(SwitchboardError):
    """The caller cancelled the run."""

    kind = ErrorKind.CANCELLED
