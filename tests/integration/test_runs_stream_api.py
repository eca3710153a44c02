"""Integration tests for the streaming run endpoint.

This module tests the SSE run endpoint including:
- Event names and order for a routed run with a tool call
- The terminal run_finished and done events
- Failed runs and setup errors
"""

import json

import pytest
from httpx import AsyncClient

from switchboard.agents.events import (
    AgentActivated,
    HandoffCompleted,
    HandoffRequested,
    MessageProduced,
    RunFinished,
    ToolCallCompleted,
    ToolCallRequested,
    step_event_adapter,
)


def parse_sse(text: str) -> list[dict]:
    """Parse an SSE response body into event/data dicts."""
    events = []
    # Normalize line endings and split by double newline
    normalized_text = text.replace("\r\n", "\n")
    for block in normalized_text.strip().split("\n\n"):
        if not block.strip():
            continue
        event_type = None
        event_data = None
        for part in block.split("\n"):
            if part.startswith("event:"):
                event_type = part.split(":", 1)[1].strip()
            elif part.startswith("data:"):
                event_data = part.split(":", 1)[1].strip()
        if event_type and event_data:
            events.append({"event": event_type, "data": json.loads(event_data)})
    return events


@pytest.mark.asyncio
async def test_stream_history_run(async_client: AsyncClient, ollama_replies, text, tool_call):
    """Test the event sequence of a streamed history run."""
    ollama_replies(
        tool_call("history_fun_fact"),
        text("Sharks first appeared around 450 million years ago."),
    )

    response = await async_client.post(
        "/api/v1/runs/stream", json={"prompt": "When did sharks first appear?"}
    )

    assert response.status_code == 200
    events = parse_sse(response.text)

    assert [e["event"] for e in events] == [
        "agent_activated",
        "handoff_requested",
        "handoff_completed",
        "agent_activated",
        "tool_call_requested",
        "tool_call_completed",
        "message_produced",
        "run_finished",
        "done",
    ]

    activations = [e["data"] for e in events if e["event"] == "agent_activated"]
    assert [(a["agent_name"], a["turn"]) for a in activations] == [
        ("Orchestrator", 1),
        ("History Agent", 2),
    ]

    finished = events[-2]["data"]["result"]
    assert finished["final_output"] == "Sharks first appeared around 450 million years ago."
    assert finished["error"] is None
    assert finished["usage"]["requests"] == 3

    assert events[-1]["data"] == {"status": "succeeded"}

    # Every step event decodes back into its typed variant
    typed = [step_event_adapter.validate_python(e["data"]) for e in events[:-1]]
    assert [type(e) for e in typed] == [
        AgentActivated,
        HandoffRequested,
        HandoffCompleted,
        AgentActivated,
        ToolCallRequested,
        ToolCallCompleted,
        MessageProduced,
        RunFinished,
    ]
    assert typed[1].to_agent == "History Agent"
    assert typed[-1].result.final_output == finished["final_output"]
    assert typed[-1].result.usage.requests == 3


@pytest.mark.asyncio
async def test_stream_weather_failure(
    async_client: AsyncClient, weather_api, ollama_replies, tool_call
):
    """Test that a failed run still ends with run_finished and done."""
    weather_api.status_code = 500
    weather_api.text = "boom"
    ollama_replies(tool_call("weather", {"location": "Paris"}))

    response = await async_client.post(
        "/api/v1/runs/stream", json={"prompt": "weather in Paris"}
    )

    events = parse_sse(response.text)

    assert [e["event"] for e in events] == [
        "agent_activated",
        "handoff_requested",
        "handoff_completed",
        "agent_activated",
        "tool_call_requested",
        "run_finished",
        "done",
    ]
    error = events[-2]["data"]["result"]["error"]
    assert error["kind"] == "tool_transport_error"
    assert error["status_code"] == 500
    assert error["arguments"] == {"location": "Paris"}
    assert events[-1]["data"] == {"status": "failed"}


@pytest.mark.asyncio
async def test_stream_tool_failure_returns_to_agent(
    async_client: AsyncClient, ollama_replies, text, tool_call
):
    """Test that invalid tool arguments are reported and the agent recovers."""
    ollama_replies(
        tool_call("weather", {}),
        text("Which city do you mean?"),
    )

    response = await async_client.post(
        "/api/v1/runs/stream", json={"prompt": "weather please", "agent": "Weather Agent"}
    )

    events = parse_sse(response.text)
    names = [e["event"] for e in events]

    assert names == [
        "agent_activated",
        "tool_call_requested",
        "tool_call_failed",
        "message_produced",
        "run_finished",
        "done",
    ]
    assert events[2]["data"]["error"]["kind"] == "invalid_arguments"
    assert events[-1]["data"] == {"status": "succeeded"}


@pytest.mark.asyncio
async def test_stream_unknown_agent(async_client: AsyncClient):
    """Test that an unknown agent is rejected before streaming starts."""
    response = await async_client.post(
        "/api/v1/runs/stream", json={"prompt": "hi", "agent": "Nobody"}
    )

    assert response.status_code == 404
    assert response.json()["detail"]["error"]["code"] == "unknown_agent"
