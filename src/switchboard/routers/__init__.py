"""FastAPI routers for API endpoints.

This package contains all route handlers organized by resource type
(health, agents, runs).
"""

from switchboard.routers import agents, health, runs

__all__ = ["agents", "health", "runs"]
