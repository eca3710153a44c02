"""Configuration module for switchboard using pydantic-settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SwitchboardSettings(BaseSettings):
    """Main configuration settings for switchboard.

    All settings can be overridden via environment variables with the
    SWITCHBOARD_ prefix or a local .env file. For example,
    SWITCHBOARD_OLLAMA_HOST will override the ollama_host setting.
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000

    # Ollama
    ollama_host: str = "http://localhost:11434"
    model: str = "llama3.2:latest"

    # Agents
    root_agent: str = "Orchestrator"
    max_turns: int = Field(default=25, ge=1)
    max_handoffs: int = Field(default=10, ge=0)

    # Tools
    weather_api_key: str = ""
    weather_api_url: str = "https://api.weatherapi.com/v1"
    tool_timeout_seconds: float = 10.0

    # CORS
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="SWITCHBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
