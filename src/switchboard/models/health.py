"""Health check response model."""

from pydantic import BaseModel, Field


class RunMetricsResponse(BaseModel):
    """Counters aggregated over every run served by this process."""

    runs_started: int = 0
    runs_succeeded: int = 0
    runs_failed: int = 0
    runs_cancelled: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    requests: int = 0


class HealthResponse(BaseModel):
    """Response model for the health check endpoint.

    Attributes:
        status: Health status indicator ("ok" or "error").
        version: The version of switchboard.
        ollama_connected: Whether Ollama is reachable (None if no client).
        ollama_host: The Ollama host URL (None if no client).
        runs: Run counters (None if the engine is not initialized).
    """

    status: str = Field(..., description="Health status of the service")
    version: str = Field(..., description="Version of switchboard")
    ollama_connected: bool | None = Field(
        default=None, description="Whether Ollama is connected"
    )
    ollama_host: str | None = Field(default=None, description="Ollama host URL")
    runs: RunMetricsResponse | None = Field(
        default=None, description="Run counters since startup"
    )
