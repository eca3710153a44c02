"""Agent listing endpoint router."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from switchboard.agents import AgentRunner
from switchboard.dependencies import get_runner
from switchboard.models.runs import AgentListResponse, AgentSummary

router = APIRouter(prefix="/api/v1/agents", tags=["agents"])


@router.get("", response_model=AgentListResponse)
async def list_agents(
    request: Request,
    runner: Annotated[AgentRunner, Depends(get_runner)],
) -> AgentListResponse:
    """List the registered agents in priority (registration) order.

    Args:
        request: FastAPI request object
        runner: Injected AgentRunner

    Returns:
        AgentListResponse with the root agent name and all agents
    """
    settings = request.app.state.settings
    return AgentListResponse(
        root_agent=settings.root_agent,
        agents=[
            AgentSummary(
                name=agent.name,
                tools=list(agent.tools),
                handoffs=list(agent.handoffs),
                handoff_description=agent.handoff_description,
            )
            for agent in runner.registry.list_agents()
        ],
    )
