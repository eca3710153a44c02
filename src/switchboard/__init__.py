"""switchboard: multi-agent orchestration with streamed step events.

A router agent delegates each request to one specialist agent, specialists
call tools, and every step of the run is streamed as an event. The package
ships a FastAPI server (REST + SSE) and a CLI on top of the engine.
"""

__version__ = "0.1.0"

from switchboard.app import create_app  # noqa: E402

__all__ = ["create_app", "__version__"]
