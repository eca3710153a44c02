"""Step events emitted while a run progresses.

Events form a closed tagged union discriminated by the ``type`` field. They are
frozen pydantic models so they can be handed to any number of consumers and
serialized as-is for SSE streaming.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from switchboard.agents.types import RunError, RunResult


class _Event(BaseModel):
    model_config = ConfigDict(frozen=True)


class AgentActivated(_Event):
    """An agent became the active agent. ``turn`` starts at 1."""

    type: Literal["agent_activated"] = "agent_activated"
    agent_name: str
    turn: int


class ToolCallRequested(_Event):
    """The active agent requested a tool call."""

    type: Literal["tool_call_requested"] = "tool_call_requested"
    agent_name: str
    tool_name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class ToolCallCompleted(_Event):
    """A tool call finished and its output was added to the conversation."""

    type: Literal["tool_call_completed"] = "tool_call_completed"
    agent_name: str
    tool_name: str
    output: str


class ToolCallFailed(_Event):
    """A tool call failed; the error was handed back to the agent."""

    type: Literal["tool_call_failed"] = "tool_call_failed"
    agent_name: str
    tool_name: str
    error: RunError


class HandoffRequested(_Event):
    """The active agent asked to delegate to another agent."""

    type: Literal["handoff_requested"] = "handoff_requested"
    from_agent: str
    to_agent: str


class HandoffCompleted(_Event):
    """The active-agent role moved to ``to_agent``."""

    type: Literal["handoff_completed"] = "handoff_completed"
    to_agent: str


class MessageProduced(_Event):
    """An agent produced its final message."""

    type: Literal["message_produced"] = "message_produced"
    agent_name: str
    text: str


class RunFinished(_Event):
    """Terminal event of every run; carries the final output or the error."""

    type: Literal["run_finished"] = "run_finished"
    result: RunResult


StepEvent = Annotated[
    AgentActivated
    | ToolCallRequested
    | ToolCallCompleted
    | ToolCallFailed
    | HandoffRequested
    | HandoffCompleted
    | MessageProduced
    | RunFinished,
    Field(discriminator="type"),
]

step_event_adapter: TypeAdapter[StepEvent] = TypeAdapter(StepEvent)
