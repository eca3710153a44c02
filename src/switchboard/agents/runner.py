"""Run loop driving a single request through one or more agents.

Each call to AgentRunner.run() returns a RunStream: a lazy, finite,
non-restartable async sequence of step events. Events are produced in the
order the state machine transitions, and the stream always ends with exactly
one RunFinished event carrying the final output or a structured error.

State machine per turn:
    Active(agent) -> invoke agent -> one of
        tool call  -> AwaitingTool(agent, tool) -> Active(agent)
        handoff    -> AwaitingHandoff(agent, target) -> Active(target)
        final text -> Terminal(Success)
    any fatal error -> Terminal(Failure)
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, AsyncGenerator, AsyncIterator, Iterator

from switchboard.agents.events import (
    AgentActivated,
    HandoffCompleted,
    HandoffRequested,
    MessageProduced,
    RunFinished,
    StepEvent,
    ToolCallCompleted,
    ToolCallFailed,
    ToolCallRequested,
)
from switchboard.agents.metrics import RunMetrics
from switchboard.agents.registry import AgentRegistry
from switchboard.agents.types import (
    AgentDefinition,
    AgentInvoker,
    AgentTurn,
    AssistantMessageItem,
    FinalMessage,
    HandoffItem,
    HandoffRequest,
    RunError,
    RunResult,
    RunState,
    RunStatus,
    ToolCallItem,
    ToolCallRequest,
    ToolOutputItem,
    UserMessageItem,
)
from switchboard.errors import (
    AgentInvocationError,
    CancelledRunError,
    HandoffLimitExceededError,
    InvalidHandoffError,
    MaxTurnsExceededError,
    SwitchboardError,
    ToolTransportError,
    UnknownToolError,
)
from switchboard.tools.executor import ToolExecutor, format_tool_output

if TYPE_CHECKING:
    from switchboard.config import SwitchboardSettings

logger = logging.getLogger(__name__)

DEFAULT_MAX_TURNS = 25
DEFAULT_MAX_HANDOFFS = 10


@dataclass(frozen=True)
class RunConfig:
    """Limits applied to every run.

    Attributes:
        max_turns: Maximum number of agent invocations per run
        max_handoffs: Maximum number of handoffs per run
    """

    max_turns: int = DEFAULT_MAX_TURNS
    max_handoffs: int = DEFAULT_MAX_HANDOFFS

    @classmethod
    def from_settings(cls, settings: "SwitchboardSettings") -> "RunConfig":
        return cls(max_turns=settings.max_turns, max_handoffs=settings.max_handoffs)


class RunStream:
    """Event stream of one run.

    Iterate it with ``async for`` to receive step events, call cancel() to
    stop the run at the next transition boundary, aclose() to stop it at once,
    and await result() to get the RunResult (draining any events not consumed
    yet).
    """

    def __init__(self, runner: "AgentRunner", prompt: str, root_agent: AgentDefinition):
        self.prompt = prompt
        self.root_agent = root_agent
        self._runner = runner
        self._events: AsyncGenerator[StepEvent, None] | None = None
        self._cancelled = False
        self._result: RunResult | None = None

    @property
    def cancelled(self) -> bool:
        """True once cancel() or aclose() was called, or the run was interrupted."""
        return self._cancelled

    @property
    def final_result(self) -> RunResult | None:
        """The run's result, or None while the run is still in progress."""
        return self._result

    def cancel(self) -> None:
        """Request cancellation; honoured at the next transition boundary."""
        if not self._cancelled and self._result is None:
            logger.info(f"Cancellation requested for run of {self.root_agent.name}")
        self._cancelled = True

    def __aiter__(self) -> AsyncIterator[StepEvent]:
        if self._events is not None:
            raise RuntimeError("A RunStream can only be iterated once")
        self._events = self._runner._drive(self)
        return self._events

    async def result(self) -> RunResult:
        """Run to completion (if needed) and return the result.

        Raises:
            RuntimeError: If the stream was closed before it produced a result
        """
        events = self._events
        if events is None:
            events = self._runner._drive(self)
            self._events = events
        if self._result is None:
            async for _ in events:
                pass
        if self._result is None:
            raise RuntimeError("Run ended without a result")
        return self._result

    async def aclose(self) -> None:
        """Stop the run now and record it as cancelled.

        Used by consumers that abandon the stream, such as a disconnected
        HTTP client. Does nothing once the run has finished.
        """
        self._cancelled = True
        if self._events is not None and self._result is None:
            await self._events.aclose()

    def _finish(self, result: RunResult) -> None:
        self._result = result


class AgentRunner:
    """Drives runs against a shared, frozen AgentRegistry.

    Args:
        registry: Agents and tools available to runs
        invoker: Default invoker for agents without their own
        executor: Tool executor (a default one is created if omitted)
        config: Run limits
        metrics: Cross-run counters (a private instance if omitted)
    """

    def __init__(
        self,
        registry: AgentRegistry,
        invoker: AgentInvoker | None = None,
        executor: ToolExecutor | None = None,
        config: RunConfig | None = None,
        metrics: RunMetrics | None = None,
    ) -> None:
        self.registry = registry
        self.invoker = invoker
        self.executor = executor or ToolExecutor()
        self.config = config or RunConfig()
        self.metrics = metrics or RunMetrics()

    def run(self, prompt: str, root_agent: str) -> RunStream:
        """Start a run for a prompt.

        Nothing happens until the returned stream is iterated.

        Args:
            prompt: The user's request
            root_agent: Name of the agent that receives the request first

        Returns:
            RunStream: The run's event stream

        Raises:
            UnknownAgentError: If root_agent is not registered
            UnknownToolError: If the registry fails validation on freeze
        """
        self.registry.freeze()
        root = self.registry.get(root_agent)
        return RunStream(self, prompt, root)

    async def _drive(self, stream: RunStream) -> AsyncGenerator[StepEvent, None]:
        state = RunState(active_agent=stream.root_agent)
        state.items.append(UserMessageItem(text=stream.prompt))
        self.metrics.record_start()
        logger.info(f"Run started with root agent {stream.root_agent.name}")

        try:
            yield self._activate(state, stream.root_agent)

            while not state.is_terminal:
                if stream.cancelled:
                    raise CancelledRunError("Run was cancelled by the caller")
                if state.agent_turns >= self.config.max_turns:
                    raise MaxTurnsExceededError(
                        f"Max turns ({self.config.max_turns}) exceeded",
                        agent_name=state.active_agent.name,
                    )

                agent = state.active_agent
                turn = await self._invoke(agent, state)
                if stream.cancelled:
                    raise CancelledRunError("Run was cancelled by the caller")

                response = turn.response
                if isinstance(response, ToolCallRequest):
                    async for event in self._run_tool(state, agent, response, stream):
                        yield event
                elif isinstance(response, HandoffRequest):
                    for event in self._handoff(state, agent, response):
                        yield event
                elif isinstance(response, FinalMessage):
                    state.items.append(
                        AssistantMessageItem(agent_name=agent.name, text=response.text)
                    )
                    state.succeed(response.text)
                    yield MessageProduced(agent_name=agent.name, text=response.text)
                else:
                    raise AgentInvocationError(
                        f"Agent '{agent.name}' returned an unsupported response: "
                        f"{type(response).__name__}",
                        agent_name=agent.name,
                    )
        except SwitchboardError as e:
            state.fail(RunError.from_exception(e, state.active_agent.name))
            if isinstance(e, CancelledRunError):
                logger.info("Run cancelled")
            else:
                logger.error(f"Run failed ({e.kind.value}): {e.message}")
        except (asyncio.CancelledError, GeneratorExit):
            # Task cancelled or stream closed mid-run; no more events can be sent
            self._abort(stream, state)
            raise

        result = state.to_result()
        stream._finish(result)
        self.metrics.record_finish(result)
        if result.error is None:
            logger.info(
                f"Run finished by {result.last_agent} after {result.turns} turns "
                f"({result.usage.total_tokens} tokens)"
            )
        yield RunFinished(result=result)

    def _abort(self, stream: RunStream, state: RunState) -> None:
        """Record a run interrupted from outside the loop as cancelled."""
        stream._cancelled = True
        if not state.is_terminal:
            error = CancelledRunError("Run was interrupted before finishing")
            state.fail(RunError.from_exception(error, state.active_agent.name))
        result = state.to_result()
        stream._finish(result)
        self.metrics.record_finish(result)
        logger.info(f"Run interrupted while {state.active_agent.name} was active")

    def _activate(self, state: RunState, agent: AgentDefinition) -> AgentActivated:
        state.active_agent = agent
        state.status = RunStatus.ACTIVE
        state.turns += 1
        logger.debug(f"[Turn {state.turns}] Agent activated: {agent.name}")
        return AgentActivated(agent_name=agent.name, turn=state.turns)

    async def _invoke(self, agent: AgentDefinition, state: RunState) -> AgentTurn:
        """Invoke the active agent once and account for its usage."""
        invoker = agent.invoker or self.invoker
        if invoker is None:
            raise AgentInvocationError(
                f"No invoker configured for agent '{agent.name}'", agent_name=agent.name
            )

        tools = self.registry.tools_for(agent)
        handoffs = self.registry.handoff_targets(agent)
        state.agent_turns += 1
        logger.debug(
            f"Invoking {agent.name} with {len(state.items)} items, "
            f"{len(tools)} tools, {len(handoffs)} handoffs"
        )

        try:
            turn = await invoker.invoke(agent, tuple(state.items), tools, handoffs)
        except SwitchboardError as e:
            e.agent_name = e.agent_name or agent.name
            raise
        except Exception as e:
            raise AgentInvocationError(
                f"Agent '{agent.name}' invocation failed: {e}", agent_name=agent.name
            ) from e

        # One request per invocation, whatever the invoker reports
        state.usage.add(turn.usage.model_copy(update={"requests": 1}))
        return turn

    async def _run_tool(
        self,
        state: RunState,
        agent: AgentDefinition,
        request: ToolCallRequest,
        stream: RunStream,
    ) -> AsyncIterator[StepEvent]:
        if request.tool_name not in agent.tools:
            raise UnknownToolError(
                f"Agent '{agent.name}' is not allowed to call tool "
                f"'{request.tool_name}'",
                agent_name=agent.name,
                tool_name=request.tool_name,
                arguments=request.arguments,
            )
        tool = self.registry.get_tool(request.tool_name)

        state.items.append(
            ToolCallItem(
                call_id=request.call_id,
                agent_name=agent.name,
                tool_name=tool.name,
                arguments=request.arguments,
            )
        )
        state.status = RunStatus.AWAITING_TOOL
        yield ToolCallRequested(
            agent_name=agent.name, tool_name=tool.name, arguments=request.arguments
        )

        try:
            result = await self.executor.execute(tool, request.arguments)
        except SwitchboardError as e:
            e.agent_name = e.agent_name or agent.name
            if isinstance(e, ToolTransportError) and tool.side_effecting:
                raise
            if stream.cancelled:
                logger.info(f"Discarding failure of {tool.name} after cancellation")
                return
            error = RunError.from_exception(e, agent.name)
            state.items.append(
                ToolOutputItem(
                    call_id=request.call_id,
                    tool_name=tool.name,
                    output=f"Error: {e.message}",
                    is_error=True,
                )
            )
            state.status = RunStatus.ACTIVE
            logger.warning(f"Tool {tool.name} failed; returning error to {agent.name}")
            yield ToolCallFailed(agent_name=agent.name, tool_name=tool.name, error=error)
            return

        if stream.cancelled:
            logger.info(f"Discarding result of {tool.name} after cancellation")
            return

        output = format_tool_output(result)
        state.items.append(
            ToolOutputItem(call_id=request.call_id, tool_name=tool.name, output=output)
        )
        state.status = RunStatus.ACTIVE
        yield ToolCallCompleted(agent_name=agent.name, tool_name=tool.name, output=output)

    def _handoff(
        self, state: RunState, agent: AgentDefinition, request: HandoffRequest
    ) -> Iterator[StepEvent]:
        """Validate and perform a handoff.

        HandoffRequested is yielded before validation so consumers see what
        the agent asked for even when the handoff is rejected.
        """
        state.status = RunStatus.AWAITING_HANDOFF
        yield HandoffRequested(from_agent=agent.name, to_agent=request.target)

        if request.target not in agent.handoffs:
            raise InvalidHandoffError(
                f"Agent '{agent.name}' cannot hand off to '{request.target}'",
                agent_name=agent.name,
            )
        if state.handoffs >= self.config.max_handoffs:
            raise HandoffLimitExceededError(
                f"Handoff limit ({self.config.max_handoffs}) exceeded",
                agent_name=agent.name,
            )

        target = self.registry.get(request.target)
        state.handoffs += 1
        state.items.append(
            HandoffItem(
                call_id=request.call_id, from_agent=agent.name, to_agent=target.name
            )
        )
        logger.info(f"Handoff {agent.name} -> {target.name}")
        yield HandoffCompleted(to_agent=target.name)
        yield self._activate(state, target)


def run_request(
    prompt: str,
    registry: AgentRegistry,
    root_agent: str,
    invoker: AgentInvoker | None = None,
    config: RunConfig | None = None,
) -> RunStream:
    """Run a prompt through a registry with a one-off runner.

    Args:
        prompt: The user's request
        registry: Agents and tools
        root_agent: Agent that receives the request first
        invoker: Default invoker for agents without their own
        config: Run limits

    Returns:
        RunStream: The run's event stream
    """
    runner = AgentRunner(registry, invoker=invoker, config=config)
    return runner.run(prompt, root_agent)
