"""Agent registry, routing and run loop.

This package provides the AgentRegistry holding agent and tool definitions,
the RouterInvoker that delegates each request to one specialist, and the
AgentRunner that drives a run and streams its step events.
"""

from switchboard.agents.catalog import ORCHESTRATOR_NAME, build_default_registry
from switchboard.agents.events import (
    AgentActivated,
    HandoffCompleted,
    HandoffRequested,
    MessageProduced,
    RunFinished,
    StepEvent,
    ToolCallCompleted,
    ToolCallFailed,
    ToolCallRequested,
)
from switchboard.agents.metrics import RunMetrics
from switchboard.agents.registry import AgentRegistry
from switchboard.agents.router import KeywordDecision, RouterInvoker
from switchboard.agents.runner import AgentRunner, RunConfig, RunStream, run_request
from switchboard.agents.types import (
    AgentDefinition,
    AgentInvoker,
    AgentTurn,
    FinalMessage,
    HandoffRequest,
    RunError,
    RunResult,
    ToolCallRequest,
    Usage,
)

__all__ = [
    # Core classes
    "AgentRegistry",
    "AgentRunner",
    "RunConfig",
    "RunMetrics",
    "RunStream",
    "run_request",
    # Routing
    "KeywordDecision",
    "RouterInvoker",
    # Definitions and responses
    "AgentDefinition",
    "AgentInvoker",
    "AgentTurn",
    "FinalMessage",
    "HandoffRequest",
    "ToolCallRequest",
    "RunError",
    "RunResult",
    "Usage",
    # Events
    "StepEvent",
    "AgentActivated",
    "ToolCallRequested",
    "ToolCallCompleted",
    "ToolCallFailed",
    "HandoffRequested",
    "HandoffCompleted",
    "MessageProduced",
    "RunFinished",
    # Default catalog
    "ORCHESTRATOR_NAME",
    "build_default_registry",
]
