"""Pydantic models for run and agent API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field

from switchboard.agents.events import StepEvent
from switchboard.agents.types import RunError, Usage


class RunRequest(BaseModel):
    """Request body for the run endpoints.

    Used by both POST /api/v1/runs (non-streaming)
    and POST /api/v1/runs/stream (streaming).
    """

    prompt: str = Field(..., min_length=1, description="The user's request")
    agent: str | None = Field(
        default=None,
        description="Agent that receives the request first (default: configured root agent)",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"prompt": "When did sharks first appear?"},
                {"prompt": "weather in Paris", "agent": "Orchestrator"},
            ]
        }
    )


class RunResponse(BaseModel):
    """Response body for the non-streaming run endpoint.

    A run that failed still answers 200: the run itself completed, and
    ``error`` describes why it ended in failure.
    """

    status: str = Field(description="succeeded or failed")
    final_output: str | None = Field(default=None, description="Final answer")
    error: RunError | None = Field(default=None, description="Failure details")
    last_agent: str | None = Field(default=None, description="Agent active at the end")
    turns: int = Field(default=0, description="Number of agent activations")
    usage: Usage = Field(description="Token usage summed over the run")
    events: list[StepEvent] = Field(
        default_factory=list, description="Step events in emission order"
    )


class AgentSummary(BaseModel):
    """Public view of a registered agent."""

    name: str
    tools: list[str] = Field(default_factory=list)
    handoffs: list[str] = Field(default_factory=list)
    handoff_description: str = ""


class AgentListResponse(BaseModel):
    """Response body for GET /api/v1/agents."""

    root_agent: str = Field(description="Default agent for new runs")
    agents: list[AgentSummary] = Field(default_factory=list)


class DoneEvent(BaseModel):
    """Final SSE event, sent after run_finished."""

    status: str
