"""Pydantic models for API request and response schemas.

This package contains all Pydantic models used for validating and
serializing API requests and responses across all endpoints.
"""

from switchboard.models.health import HealthResponse, RunMetricsResponse
from switchboard.models.runs import (
    AgentListResponse,
    AgentSummary,
    DoneEvent,
    RunRequest,
    RunResponse,
)

__all__ = [
    "AgentListResponse",
    "AgentSummary",
    "DoneEvent",
    "HealthResponse",
    "RunMetricsResponse",
    "RunRequest",
    "RunResponse",
]
