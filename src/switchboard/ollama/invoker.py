"""Agent invoker backed by Ollama chat completions.

One agent turn is one streamed chat request. The agent's instructions become
the system message, its tools and handoff targets become function tools, and
the first tool call in the reply decides the turn: a call to a
``transfer_to_<agent>`` function is a handoff, any other call is a tool call,
and a reply without tool calls is the final message.
"""

import json
import logging
import re
from typing import Any, Sequence

from switchboard.agents.types import (
    AgentDefinition,
    AgentResponse,
    AgentTurn,
    AssistantMessageItem,
    ConversationItem,
    FinalMessage,
    HandoffItem,
    HandoffRequest,
    ToolCallItem,
    ToolCallRequest,
    ToolOutputItem,
    Usage,
    UserMessageItem,
)
from switchboard.errors import AgentInvocationError
from switchboard.ollama.client import OllamaClient
from switchboard.tools.types import ToolDefinition

logger = logging.getLogger(__name__)

HANDOFF_PREFIX = "transfer_to_"


def handoff_tool_name(agent_name: str) -> str:
    """Get the function name used to hand off to an agent.

    Example:
        >>> handoff_tool_name("History Agent")
        'transfer_to_history_agent'
    """
    slug = re.sub(r"\W+", "_", agent_name.lower()).strip("_")
    return f"{HANDOFF_PREFIX}{slug}"


def handoff_tool(agent: AgentDefinition) -> dict[str, Any]:
    """Build the function-tool schema for a handoff target."""
    description = f"Handoff to the {agent.name} agent to handle the request."
    if agent.handoff_description:
        description = f"{description} {agent.handoff_description}"
    return {
        "type": "function",
        "function": {
            "name": handoff_tool_name(agent.name),
            "description": description,
            "parameters": {"type": "object", "properties": {}},
        },
    }


def convert_history_to_ollama_format(
    agent: AgentDefinition, history: Sequence[ConversationItem]
) -> list[dict[str, Any]]:
    """Convert conversation items to Ollama chat messages.

    Args:
        agent: The agent being invoked (its instructions become the system message)
        history: Conversation so far

    Returns:
        List of message dicts in Ollama format
    """
    messages: list[dict[str, Any]] = []
    if agent.instructions:
        messages.append({"role": "system", "content": agent.instructions})

    for item in history:
        if isinstance(item, UserMessageItem):
            messages.append({"role": "user", "content": item.text})
        elif isinstance(item, ToolCallItem):
            messages.append(
                {
                    "role": "assistant",
                    "content": "",
                    "tool_calls": [
                        {"function": {"name": item.tool_name, "arguments": item.arguments}}
                    ],
                }
            )
        elif isinstance(item, ToolOutputItem):
            messages.append(
                {"role": "tool", "content": item.output, "tool_name": item.tool_name}
            )
        elif isinstance(item, HandoffItem):
            name = handoff_tool_name(item.to_agent)
            messages.append(
                {
                    "role": "assistant",
                    "content": "",
                    "tool_calls": [{"function": {"name": name, "arguments": {}}}],
                }
            )
            messages.append(
                {
                    "role": "tool",
                    "content": json.dumps({"assistant": item.to_agent}),
                    "tool_name": name,
                }
            )
        elif isinstance(item, AssistantMessageItem):
            messages.append({"role": "assistant", "content": item.text})

    return messages


def _parse_arguments(raw: Any) -> dict[str, Any]:
    if raw is None:
        return {}
    if isinstance(raw, str):
        if not raw.strip():
            return {}
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise AgentInvocationError(f"Model sent malformed tool arguments: {raw}") from e
    if not isinstance(raw, dict):
        raise AgentInvocationError(f"Model sent non-object tool arguments: {raw!r}")
    return dict(raw)


class OllamaAgentInvoker:
    """AgentInvoker that asks an Ollama model for each agent turn.

    Args:
        client: Shared Ollama client
        default_model: Model used for agents without a model override
        options: Optional model parameters passed on every request
    """

    def __init__(
        self,
        client: OllamaClient,
        default_model: str,
        options: dict[str, Any] | None = None,
    ) -> None:
        self.client = client
        self.default_model = default_model
        self.options = options

    async def invoke(
        self,
        agent: AgentDefinition,
        history: Sequence[ConversationItem],
        tools: Sequence[ToolDefinition],
        handoffs: Sequence[AgentDefinition],
    ) -> AgentTurn:
        """Run one agent turn against the model.

        Raises:
            AgentInvocationError: If the stream fails or ends without a
                completion marker
        """
        model = agent.model or self.default_model
        messages = convert_history_to_ollama_format(agent, history)
        handoff_names = {handoff_tool_name(h.name): h.name for h in handoffs}
        tool_schemas = [t.to_ollama_tool() for t in tools]
        tool_schemas.extend(handoff_tool(h) for h in handoffs)

        content_parts: list[str] = []
        tool_calls: list[dict[str, Any]] = []
        final_chunk: dict[str, Any] | None = None

        try:
            async for chunk in self.client.chat_stream(
                model=model,
                messages=messages,
                tools=tool_schemas,
                options=self.options,
            ):
                message = chunk.get("message") or {}
                content = message.get("content") or ""
                if content:
                    content_parts.append(content)
                tool_calls.extend(message.get("tool_calls") or [])

                if chunk.get("done"):
                    final_chunk = chunk
                    break
        except Exception as e:
            raise AgentInvocationError(
                f"Failed to get response from Ollama: {e}", agent_name=agent.name
            ) from e

        if final_chunk is None:
            raise AgentInvocationError(
                "Stream ended without completion marker", agent_name=agent.name
            )

        usage = Usage(
            input_tokens=final_chunk.get("prompt_eval_count") or 0,
            output_tokens=final_chunk.get("eval_count") or 0,
        )
        response = self._parse_response(
            agent, "".join(content_parts), tool_calls, handoff_names
        )
        logger.debug(f"{agent.name} responded with {type(response).__name__}")
        return AgentTurn(response=response, usage=usage)

    def _parse_response(
        self,
        agent: AgentDefinition,
        content: str,
        tool_calls: list[dict[str, Any]],
        handoff_names: dict[str, str],
    ) -> AgentResponse:
        if not tool_calls:
            return FinalMessage(text=content)

        if len(tool_calls) > 1:
            logger.warning(
                f"{agent.name} requested {len(tool_calls)} tool calls; "
                "only the first is used"
            )

        function = tool_calls[0].get("function") or {}
        name = function.get("name") or ""
        if name in handoff_names:
            return HandoffRequest(target=handoff_names[name])
        if name.startswith(HANDOFF_PREFIX):
            # Unknown target; the run loop rejects it as an invalid handoff
            return HandoffRequest(target=name[len(HANDOFF_PREFIX) :])
        return ToolCallRequest(
            tool_name=name, arguments=_parse_arguments(function.get("arguments"))
        )
