"""Pytest configuration for integration tests.

This module provides integration-test-specific fixtures that replace the
Ollama client and the weather API with mocks before the app is created, so
every request runs the real engine against scripted model replies.
"""

from unittest.mock import AsyncMock, patch

import httpx
import pytest


class FakeWeatherAPI:
    """httpx MockTransport handler standing in for weatherapi.com."""

    def __init__(self) -> None:
        self.status_code = 200
        self.payload: dict = {
            "location": {"name": "Paris", "country": "France"},
            "current": {"temp_c": 18.0, "condition": {"text": "Partly cloudy"}},
        }
        self.text: str | None = None
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.payload)


@pytest.fixture(autouse=True)
def mock_ollama_client():
    """Mock OllamaClient for all integration tests.

    This fixture patches the OllamaClient class before the app is created,
    ensuring the lifespan uses our mock instead of creating a real client.
    """
    with patch("switchboard.app.OllamaClient") as mock_client_class:
        mock_instance = AsyncMock()
        mock_instance.host = "http://localhost:11434"
        mock_instance.check_connection.return_value = True

        # Return the mock instance when OllamaClient is instantiated
        mock_client_class.return_value = mock_instance

        yield mock_instance


@pytest.fixture(autouse=True)
def weather_api():
    """Route the tools' HTTP client to a fake weather API."""
    fake = FakeWeatherAPI()
    with patch(
        "switchboard.app.create_http_client",
        side_effect=lambda settings: httpx.AsyncClient(
            transport=httpx.MockTransport(fake)
        ),
    ):
        yield fake


@pytest.fixture
def ollama_replies(mock_ollama_client):
    """Script the model's replies, one list of chunks per chat request.

    Returns:
        Callable taking reply chunk lists; the recorded requests are
        available as ``mock_ollama_client.requests``.
    """
    mock_ollama_client.requests = []

    def script(*replies):
        pending = list(replies)

        async def mock_chat_stream(model, messages, tools=None, options=None):
            mock_ollama_client.requests.append(
                {"model": model, "messages": messages, "tools": tools}
            )
            for chunk in pending.pop(0):
                yield chunk

        mock_ollama_client.chat_stream = mock_chat_stream

    return script


def text_reply(text, prompt_eval_count=20, eval_count=5):
    """Chunks of a plain text reply."""
    return [
        {
            "model": "llama3.2:latest",
            "message": {"role": "assistant", "content": text},
            "done": False,
        },
        {
            "model": "llama3.2:latest",
            "message": {"role": "assistant", "content": ""},
            "done": True,
            "prompt_eval_count": prompt_eval_count,
            "eval_count": eval_count,
        },
    ]


def tool_call_reply(name, arguments=None, prompt_eval_count=15, eval_count=3):
    """Chunks of a reply calling one function."""
    return [
        {
            "model": "llama3.2:latest",
            "message": {
                "role": "assistant",
                "content": "",
                "tool_calls": [{"function": {"name": name, "arguments": arguments or {}}}],
            },
            "done": False,
        },
        {
            "model": "llama3.2:latest",
            "message": {"role": "assistant", "content": ""},
            "done": True,
            "prompt_eval_count": prompt_eval_count,
            "eval_count": eval_count,
        },
    ]


@pytest.fixture
def text():
    """Builder for plain text replies."""
    return text_reply


@pytest.fixture
def tool_call():
    """Builder for function-call replies."""
    return tool_call_reply
