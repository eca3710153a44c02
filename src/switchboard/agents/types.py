"""Data types for agents, conversations and runs.

This module defines the immutable agent definition, the conversation items a
run accumulates, the three possible agent responses, usage accounting, and the
structured result of a run.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, Sequence

from pydantic import BaseModel, Field, computed_field

from switchboard.errors import ErrorKind, SwitchboardError, ToolTransportError

if TYPE_CHECKING:
    from switchboard.tools.types import ToolDefinition


def new_call_id() -> str:
    """Generate a short identifier for a tool call or handoff."""
    return f"call_{uuid.uuid4().hex[:12]}"


# --- Agent definition ---


@dataclass(frozen=True)
class AgentDefinition:
    """Definition of an agent.

    Attributes:
        name: Unique agent name
        instructions: Directive text given to the agent's model
        tools: Names of the tools this agent may call (capability set)
        handoffs: Names of the agents this agent may hand off to
        handoff_description: When a delegating agent should pick this one
        model: Optional model override for this agent
        invoker: Optional invoker override (e.g. a router decision function)
    """

    name: str
    instructions: str = ""
    tools: tuple[str, ...] = ()
    handoffs: tuple[str, ...] = ()
    handoff_description: str = ""
    model: str | None = None
    invoker: "AgentInvoker | None" = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        """Normalise list inputs to tuples so the definition stays immutable."""
        object.__setattr__(self, "tools", tuple(self.tools))
        object.__setattr__(self, "handoffs", tuple(self.handoffs))


# --- Conversation items ---


@dataclass(frozen=True)
class UserMessageItem:
    """The user's prompt."""

    text: str


@dataclass(frozen=True)
class ToolCallItem:
    """A tool call requested by an agent."""

    call_id: str
    agent_name: str
    tool_name: str
    arguments: dict[str, Any]


@dataclass(frozen=True)
class ToolOutputItem:
    """The output (or error text) of a tool call."""

    call_id: str
    tool_name: str
    output: str
    is_error: bool = False


@dataclass(frozen=True)
class HandoffItem:
    """A completed transfer of the active-agent role."""

    call_id: str
    from_agent: str
    to_agent: str


@dataclass(frozen=True)
class AssistantMessageItem:
    """Final text produced by an agent."""

    agent_name: str
    text: str


ConversationItem = (
    UserMessageItem
    | ToolCallItem
    | ToolOutputItem
    | HandoffItem
    | AssistantMessageItem
)


# --- Agent responses ---


@dataclass(frozen=True)
class ToolCallRequest:
    """The agent asks for a tool to be executed."""

    tool_name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    call_id: str = field(default_factory=new_call_id)


@dataclass(frozen=True)
class HandoffRequest:
    """The agent delegates to another agent."""

    target: str
    call_id: str = field(default_factory=new_call_id)


@dataclass(frozen=True)
class FinalMessage:
    """The agent answers with final text."""

    text: str


AgentResponse = ToolCallRequest | HandoffRequest | FinalMessage


# --- Usage ---


class Usage(BaseModel):
    """Token usage accumulated over one or more agent invocations."""

    input_tokens: int = 0
    output_tokens: int = 0
    requests: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_tokens(self) -> int:
        """Sum of input and output tokens."""
        return self.input_tokens + self.output_tokens

    def add(self, other: "Usage") -> None:
        """Add another usage record to this one in place."""
        self.input_tokens += other.input_tokens
        self.output_tokens += other.output_tokens
        self.requests += other.requests


@dataclass(frozen=True)
class AgentTurn:
    """Outcome of one agent invocation.

    Attributes:
        response: Exactly one of tool call, handoff or final message
        usage: Tokens spent by this invocation; the run loop counts the
               request itself, so invokers leave ``requests`` at 0
    """

    response: AgentResponse
    usage: Usage = field(default_factory=Usage)


class AgentInvoker(Protocol):
    """Collaborator that produces one response per agent turn.

    Implementations may call a chat-completion API, a local model, or plain
    Python decision logic; the run loop does not care which.
    """

    async def invoke(
        self,
        agent: AgentDefinition,
        history: Sequence[ConversationItem],
        tools: Sequence["ToolDefinition"],
        handoffs: Sequence[AgentDefinition],
    ) -> AgentTurn: ...


# --- Run state and result ---


class RunStatus(str, Enum):
    """States of the run state machine."""

    ACTIVE = "active"
    AWAITING_TOOL = "awaiting_tool"
    AWAITING_HANDOFF = "awaiting_handoff"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class RunError(BaseModel):
    """Structured description of why a run failed."""

    kind: ErrorKind
    message: str
    agent_name: str | None = None
    tool_name: str | None = None
    arguments: dict[str, Any] | None = None
    status_code: int | None = None
    body: str | None = None

    @classmethod
    def from_exception(
        cls, error: SwitchboardError, agent_name: str | None = None
    ) -> "RunError":
        """Build a RunError from a raised switchboard error.

        Args:
            error: The error raised inside the run loop
            agent_name: Active agent, used when the error carries none

        Returns:
            RunError: The structured error record
        """
        status_code = None
        body = None
        if isinstance(error, ToolTransportError):
            status_code = error.status_code
            body = error.body
        return cls(
            kind=error.kind,
            message=error.message,
            agent_name=error.agent_name or agent_name,
            tool_name=error.tool_name,
            arguments=error.arguments,
            status_code=status_code,
            body=body,
        )


class RunResult(BaseModel):
    """Terminal outcome of a run: final output or error, plus usage."""

    final_output: str | None = None
    error: RunError | None = None
    usage: Usage = Field(default_factory=Usage)
    last_agent: str | None = None
    turns: int = 0

    @property
    def succeeded(self) -> bool:
        """True if the run produced a final output."""
        return self.error is None and self.final_output is not None


@dataclass
class RunState:
    """Mutable state of a single run. Owned exclusively by one run.

    Attributes:
        active_agent: The agent currently holding the active role
        items: Conversation so far, in order
        usage: Cumulative usage across invocations
        status: Current state machine state
        turns: Number of AgentActivated events emitted so far
        handoffs: Number of completed handoffs
        agent_turns: Number of agent invocations
        final_output: Final text, set only on success
        error: Failure record, set only on failure
    """

    active_agent: AgentDefinition
    items: list[ConversationItem] = field(default_factory=list)
    usage: Usage = field(default_factory=Usage)
    status: RunStatus = RunStatus.ACTIVE
    turns: int = 0
    handoffs: int = 0
    agent_turns: int = 0
    final_output: str | None = None
    error: RunError | None = None

    @property
    def is_terminal(self) -> bool:
        """True once the run has succeeded or failed."""
        return self.status in (RunStatus.SUCCEEDED, RunStatus.FAILED)

    def succeed(self, text: str) -> None:
        """Move to Terminal(Success) with the given final output."""
        self.status = RunStatus.SUCCEEDED
        self.final_output = text
        self.error = None

    def fail(self, error: RunError) -> None:
        """Move to Terminal(Failure); the final output stays unset."""
        self.status = RunStatus.FAILED
        self.final_output = None
        self.error = error

    def to_result(self) -> RunResult:
        """Snapshot the state as a RunResult."""
        return RunResult(
            final_output=self.final_output,
            error=self.error,
            usage=self.usage.model_copy(),
            last_agent=self.active_agent.name,
            turns=self.turns,
        )
