"""Run API endpoints.

This module provides endpoints that run a prompt through the agent engine,
either collecting the whole run (non-streaming) or streaming every step
event via Server-Sent Events.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request
from sse_starlette.sse import EventSourceResponse

from switchboard.agents import AgentRunner, RunFinished, RunStream, StepEvent
from switchboard.dependencies import get_runner
from switchboard.errors import UnknownAgentError
from switchboard.models.runs import DoneEvent, RunRequest, RunResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/runs", tags=["runs"])


def _start_run(runner: AgentRunner, request_body: RunRequest, request: Request) -> RunStream:
    """Start a run, mapping an unknown root agent to a 404.

    Raises:
        HTTPException: 404 if the requested agent does not exist
    """
    root_agent = request_body.agent or request.app.state.settings.root_agent
    try:
        return runner.run(request_body.prompt, root_agent)
    except UnknownAgentError as e:
        raise HTTPException(
            status_code=404,
            detail={
                "error": {
                    "code": e.kind.value,
                    "message": e.message,
                    "details": {"agent": root_agent},
                }
            },
        )


@router.post("", response_model=RunResponse)
async def run_non_streaming(
    request_body: RunRequest,
    request: Request,
    runner: Annotated[AgentRunner, Depends(get_runner)],
) -> RunResponse:
    """Run a prompt and return the final output once the run has finished.

    Args:
        request_body: Run request containing the prompt and optional agent
        request: FastAPI request object
        runner: Injected AgentRunner

    Returns:
        RunResponse with the final output or error, usage and all events

    Raises:
        HTTPException: 404 if the requested agent does not exist
    """
    stream = _start_run(runner, request_body, request)
    logger.info(f"Starting run for agent {stream.root_agent.name}")

    events: list[StepEvent] = []
    async for event in stream:
        events.append(event)

    result = await stream.result()
    return RunResponse(
        status="succeeded" if result.succeeded else "failed",
        final_output=result.final_output,
        error=result.error,
        last_agent=result.last_agent,
        turns=result.turns,
        usage=result.usage,
        events=events,
    )


@router.post("/stream")
async def run_streaming(
    request_body: RunRequest,
    request: Request,
    runner: Annotated[AgentRunner, Depends(get_runner)],
) -> EventSourceResponse:
    """Stream a run's step events via Server-Sent Events (SSE).

    SSE Events:
        - agent_activated, tool_call_requested, tool_call_completed,
          tool_call_failed, handoff_requested, handoff_completed,
          message_produced: one per step event, in emission order
        - run_finished: terminal event with the final output or error
        - done: stream is complete

    A client disconnect, or the response being torn down early, closes the
    run and records it as cancelled.

    Raises:
        HTTPException: 404 if the requested agent does not exist
    """
    stream = _start_run(runner, request_body, request)
    logger.info(f"Starting streaming run for agent {stream.root_agent.name}")

    async def event_generator():
        """Generate SSE events from the run's step events."""
        try:
            async for event in stream:
                if await request.is_disconnected():
                    logger.warning("Client disconnected during run; cancelling")
                    await stream.aclose()
                    return

                yield {"event": event.type, "data": event.model_dump_json()}

                if isinstance(event, RunFinished):
                    status = "succeeded" if event.result.succeeded else "failed"
                    yield {
                        "event": "done",
                        "data": DoneEvent(status=status).model_dump_json(),
                    }
        finally:
            if stream.final_result is None:
                await stream.aclose()

    return EventSourceResponse(event_generator())
