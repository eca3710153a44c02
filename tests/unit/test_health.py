"""Unit tests for the health check endpoint."""

from unittest.mock import AsyncMock

import pytest

from switchboard.agents.types import RunError, RunResult, Usage
from switchboard.errors import ErrorKind


def make_ollama_client(connected=True, error=None):
    client = AsyncMock()
    client.host = "http://ollama.test:11434"
    client.check_connection.return_value = connected
    if error is not None:
        client.check_connection.side_effect = error
    return client


class TestHealth:
    """Tests for server status, Ollama connectivity and run counters."""

    @pytest.mark.asyncio
    async def test_fresh_server_reports_zero_runs(self, async_client):
        response = await async_client.get("/api/v1/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["version"] == "0.1.0"
        assert data["runs"] == {
            "runs_started": 0,
            "runs_succeeded": 0,
            "runs_failed": 0,
            "runs_cancelled": 0,
            "input_tokens": 0,
            "output_tokens": 0,
            "requests": 0,
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "client, expected",
        [
            (make_ollama_client(connected=True), True),
            (make_ollama_client(connected=False), False),
            (make_ollama_client(error=ConnectionError("refused")), False),
        ],
        ids=["connected", "unreachable", "check-raises"],
    )
    async def test_ollama_connectivity(self, async_client, test_app, client, expected):
        """The server stays healthy whatever Ollama's state."""
        test_app.state.ollama_client = client

        response = await async_client.get("/api/v1/health")

        data = response.json()
        assert data["status"] == "ok"
        assert data["ollama_connected"] is expected
        assert data["ollama_host"] == "http://ollama.test:11434"

    @pytest.mark.asyncio
    async def test_no_ollama_client(self, async_client, test_app):
        delattr(test_app.state, "ollama_client")

        response = await async_client.get("/api/v1/health")

        data = response.json()
        assert data["ollama_connected"] is None
        assert data["ollama_host"] is None

    @pytest.mark.asyncio
    async def test_finished_runs_are_counted(self, async_client, test_app):
        """Succeeded and cancelled runs land in their own counters."""
        metrics = test_app.state.runner.metrics
        for _ in range(2):
            metrics.record_start()
        metrics.record_finish(
            RunResult(
                final_output="done",
                usage=Usage(input_tokens=12, output_tokens=3, requests=2),
                last_agent="History Agent",
                turns=2,
            )
        )
        metrics.record_finish(
            RunResult(
                error=RunError(kind=ErrorKind.CANCELLED, message="stopped"),
                usage=Usage(input_tokens=4, requests=1),
                last_agent="Orchestrator",
                turns=1,
            )
        )

        response = await async_client.get("/api/v1/health")

        runs = response.json()["runs"]
        assert runs["runs_started"] == 2
        assert runs["runs_succeeded"] == 1
        assert runs["runs_cancelled"] == 1
        assert runs["runs_failed"] == 0
        assert runs["input_tokens"] == 16
        assert runs["requests"] == 3

    @pytest.mark.asyncio
    async def test_no_runner(self, async_client, test_app):
        delattr(test_app.state, "runner")

        response = await async_client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["runs"] is None
