"""Router agent decision logic.

A router is a regular agent whose invoker performs exactly one action per turn:
a handoff to one target from its declared handoff set. The decision itself is a
pluggable function. When it has no confident match, the router falls back to
the highest-priority candidate instead of answering or stalling.
"""

import inspect
import logging
import re
from typing import Awaitable, Callable, Iterable, Mapping, Sequence

from switchboard.agents.types import (
    AgentDefinition,
    AgentTurn,
    ConversationItem,
    HandoffRequest,
    UserMessageItem,
)
from switchboard.errors import InvalidHandoffError
from switchboard.tools.types import ToolDefinition

logger = logging.getLogger(__name__)

# (history, candidates in priority order) -> chosen agent name, or None
DecisionFunction = Callable[
    [Sequence[ConversationItem], Sequence[AgentDefinition]],
    str | None | Awaitable[str | None],
]


def latest_user_text(history: Sequence[ConversationItem]) -> str:
    """Get the text of the most recent user message, or an empty string."""
    for item in reversed(history):
        if isinstance(item, UserMessageItem):
            return item.text
    return ""


class KeywordDecision:
    """Scores candidates by keyword hits in the latest user message.

    Keywords match case-insensitively on word boundaries; multi-word keywords
    ("when did") are allowed. The candidate with the most hits wins. Ties go
    to the candidate listed first, i.e. the first registered.

    Attributes:
        keywords: Mapping of agent name to its keywords
    """

    def __init__(self, keywords: Mapping[str, Iterable[str]]) -> None:
        self.keywords = {name: tuple(words) for name, words in keywords.items()}
        self._patterns = {
            name: [
                re.compile(rf"\b{re.escape(word.lower())}\b") for word in words
            ]
            for name, words in self.keywords.items()
        }

    def score(self, text: str, agent_name: str) -> int:
        """Count keyword hits for one agent."""
        lowered = text.lower()
        return sum(
            1 for pattern in self._patterns.get(agent_name, []) if pattern.search(lowered)
        )

    def __call__(
        self,
        history: Sequence[ConversationItem],
        candidates: Sequence[AgentDefinition],
    ) -> str | None:
        text = latest_user_text(history)
        best_name: str | None = None
        best_score = 0
        for candidate in candidates:
            score = self.score(text, candidate.name)
            # Strictly greater keeps the earlier candidate on ties
            if score > best_score:
                best_name, best_score = candidate.name, score
        logger.debug(f"Keyword decision: {best_name!r} (score {best_score})")
        return best_name


class RouterInvoker:
    """Invoker for router agents: always answers with exactly one handoff.

    Args:
        decide: Decision function choosing a target name (sync or async)
    """

    def __init__(self, decide: DecisionFunction) -> None:
        self.decide = decide

    async def invoke(
        self,
        agent: AgentDefinition,
        history: Sequence[ConversationItem],
        tools: Sequence[ToolDefinition],
        handoffs: Sequence[AgentDefinition],
    ) -> AgentTurn:
        """Pick one handoff target for the conversation so far.

        Args:
            agent: The router agent
            history: Conversation so far
            tools: Ignored; routers never call tools
            handoffs: Candidate targets in priority order

        Returns:
            AgentTurn: A turn whose response is a HandoffRequest

        Raises:
            InvalidHandoffError: If the router declares no handoff targets
        """
        if not handoffs:
            raise InvalidHandoffError(
                f"Router '{agent.name}' has no handoff targets", agent_name=agent.name
            )

        choice = self.decide(history, handoffs)
        if inspect.isawaitable(choice):
            choice = await choice

        if choice is None:
            choice = handoffs[0].name
            logger.info(
                f"Router {agent.name} found no confident match; "
                f"falling back to {choice}"
            )
        else:
            logger.info(f"Router {agent.name} selected {choice}")

        return AgentTurn(response=HandoffRequest(target=choice))
