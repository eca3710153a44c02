"""Console formatting of step events for the CLI.

Turns each step event into one "[Turn N] ..." progress line. The turn number
is taken from the latest AgentActivated event.
"""

import json
from typing import Any

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
from switchboard.agents.types import RunResult


def truncate(text: str, limit: int) -> str:
    """Shorten text to ``limit`` characters, marking the cut with an ellipsis."""
    return text[:limit] + ("…" if len(text) > limit else "")


def _json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, default=str)


class StepPrinter:
    """Formats step events as progress lines, tracking the turn number."""

    def __init__(self) -> None:
        self.turn = 0

    def format(self, event: StepEvent) -> str | None:
        """Format one event; returns None for events without a progress line."""
        if isinstance(event, AgentActivated):
            self.turn = event.turn
            return f"[Turn {self.turn}] Agent: {event.agent_name}"

        turn = self.turn or 1
        if isinstance(event, ToolCallRequested):
            args = _json(event.arguments) if event.arguments else "{}"
            summary = f'tool_called: tool="{event.tool_name}" args={truncate(args, 60)}'
        elif isinstance(event, ToolCallCompleted):
            summary = (
                f'tool_output: tool="{event.tool_name}" '
                f"output={truncate(event.output, 80)}"
            )
        elif isinstance(event, ToolCallFailed):
            summary = (
                f'tool_failed: tool="{event.tool_name}" '
                f"error={truncate(event.error.message, 80)}"
            )
        elif isinstance(event, HandoffRequested):
            summary = f"handoff_requested: delegate to → {event.to_agent}"
        elif isinstance(event, HandoffCompleted):
            summary = "handoff_occurred: handoff completed"
        elif isinstance(event, MessageProduced):
            summary = f"message_output_created: text={truncate(event.text, 80)}"
        elif isinstance(event, RunFinished):
            return None
        else:
            summary = f"type={event.type}"
        return f"[Turn {turn}] {summary}"


def format_result(result: RunResult) -> str:
    """Format the final output (or error) and the token usage block."""
    lines = []
    if result.error is None:
        lines.extend(["", "--- Final output ---", result.final_output or ""])
    else:
        lines.extend(["", "--- Run failed ---", f"{result.error.kind.value}: {result.error.message}"])
        if result.error.status_code is not None:
            lines.append(f"Status code: {result.error.status_code}")

    usage = result.usage
    lines.extend(
        [
            "",
            "--- Token usage ---",
            f"Input tokens: {usage.input_tokens}",
            f"Output tokens: {usage.output_tokens}",
            f"Total tokens: {usage.total_tokens}",
            f"Requests: {usage.requests}",
        ]
    )
    return "\n".join(lines)
