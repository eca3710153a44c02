"""AgentRegistry holding agent and tool definitions.

Definitions are registered during setup. Once the registry is frozen (the
runner freezes it on first use) it is a read-only snapshot that any number of
concurrent runs may share without coordination.
"""

import logging

from switchboard.agents.types import AgentDefinition
from switchboard.errors import (
    DuplicateNameError,
    RegistryFrozenError,
    UnknownAgentError,
    UnknownToolError,
)
from switchboard.tools.types import ToolDefinition

logger = logging.getLogger(__name__)


class AgentRegistry:
    """Registry of agents and the tools they may call.

    Registration order is significant: it is the fixed priority order used
    to break ties when a router cannot pick a single specialist.
    """

    def __init__(self) -> None:
        self._agents: dict[str, AgentDefinition] = {}
        self._tools: dict[str, ToolDefinition] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        """True once setup has ended."""
        return self._frozen

    def register(self, agent: AgentDefinition) -> AgentDefinition:
        """Register an agent definition.

        Args:
            agent: The agent to register

        Returns:
            AgentDefinition: The registered agent

        Raises:
            DuplicateNameError: If an agent with this name exists
            RegistryFrozenError: If the registry is frozen
        """
        self._check_not_frozen()
        if agent.name in self._agents:
            raise DuplicateNameError(
                f"Agent '{agent.name}' is already registered", agent_name=agent.name
            )
        self._agents[agent.name] = agent
        logger.debug(f"Registered agent: {agent.name}")
        return agent

    def register_tool(self, tool: ToolDefinition) -> ToolDefinition:
        """Register a tool definition.

        Raises:
            DuplicateNameError: If a tool with this name exists
            RegistryFrozenError: If the registry is frozen
        """
        self._check_not_frozen()
        if tool.name in self._tools:
            raise DuplicateNameError(
                f"Tool '{tool.name}' is already registered", tool_name=tool.name
            )
        self._tools[tool.name] = tool
        logger.debug(f"Registered tool: {tool.name}")
        return tool

    def get(self, name: str) -> AgentDefinition:
        """Get an agent by name.

        Raises:
            UnknownAgentError: If no agent has this name
        """
        try:
            return self._agents[name]
        except KeyError:
            raise UnknownAgentError(
                f"Agent '{name}' is not registered", agent_name=name
            ) from None

    def get_tool(self, name: str) -> ToolDefinition:
        """Get a tool by name.

        Raises:
            UnknownToolError: If no tool has this name
        """
        try:
            return self._tools[name]
        except KeyError:
            raise UnknownToolError(
                f"Tool '{name}' is not registered", tool_name=name
            ) from None

    def __contains__(self, name: object) -> bool:
        return name in self._agents

    def __len__(self) -> int:
        return len(self._agents)

    def list_agents(self) -> list[AgentDefinition]:
        """List all agents in registration order."""
        return list(self._agents.values())

    def list_tools(self) -> list[ToolDefinition]:
        """List all tools in registration order."""
        return list(self._tools.values())

    def tools_for(self, agent: AgentDefinition) -> list[ToolDefinition]:
        """Resolve an agent's capability set to tool definitions."""
        return [self.get_tool(name) for name in agent.tools]

    def handoff_targets(self, agent: AgentDefinition) -> list[AgentDefinition]:
        """Resolve an agent's handoff set, ordered by registration priority.

        Args:
            agent: The delegating agent

        Returns:
            list[AgentDefinition]: Targets, first-registered first
        """
        allowed = set(agent.handoffs)
        return [a for a in self._agents.values() if a.name in allowed]

    def validate(self) -> None:
        """Check that every declared tool and handoff target exists.

        Raises:
            UnknownToolError: If an agent declares an unregistered tool
            UnknownAgentError: If an agent declares an unregistered target
        """
        for agent in self._agents.values():
            for tool_name in agent.tools:
                if tool_name not in self._tools:
                    raise UnknownToolError(
                        f"Agent '{agent.name}' declares unknown tool '{tool_name}'",
                        agent_name=agent.name,
                        tool_name=tool_name,
                    )
            for target in agent.handoffs:
                if target not in self._agents:
                    raise UnknownAgentError(
                        f"Agent '{agent.name}' declares unknown handoff target "
                        f"'{target}'",
                        agent_name=agent.name,
                    )

    def freeze(self) -> None:
        """Validate the registry and end setup. Idempotent."""
        if self._frozen:
            return
        self.validate()
        self._frozen = True
        logger.info(
            f"Agent registry frozen with {len(self._agents)} agents "
            f"and {len(self._tools)} tools"
        )

    def _check_not_frozen(self) -> None:
        if self._frozen:
            raise RegistryFrozenError("Registry is frozen; register before running")
