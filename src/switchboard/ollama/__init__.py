"""Ollama client wrapper and integration layer.

This package provides the async Ollama client and the agent invoker that turns
one agent turn into one streamed Ollama chat request.
"""

from switchboard.ollama.client import OllamaClient
from switchboard.ollama.invoker import OllamaAgentInvoker, handoff_tool_name

__all__ = ["OllamaAgentInvoker", "OllamaClient", "handoff_tool_name"]
