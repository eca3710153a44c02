"""Cross-run counters for observability."""

from dataclasses import asdict, dataclass
from threading import Lock

from switchboard.agents.types import RunResult
from switchboard.errors import ErrorKind


@dataclass
class RunMetricsSnapshot:
    """Point-in-time copy of the run counters."""

    runs_started: int = 0
    runs_succeeded: int = 0
    runs_failed: int = 0
    runs_cancelled: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    requests: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


class RunMetrics:
    """Counters shared by all runs of a runner.

    This is the only state that crosses run boundaries, so every update
    happens under a lock.
    """

    def __init__(self) -> None:
        self._counters = RunMetricsSnapshot()
        self._lock = Lock()

    def record_start(self) -> None:
        """Count a run that has started."""
        with self._lock:
            self._counters.runs_started += 1

    def record_finish(self, result: RunResult) -> None:
        """Count a finished run and add its usage."""
        with self._lock:
            if result.error is None:
                self._counters.runs_succeeded += 1
            elif result.error.kind == ErrorKind.CANCELLED:
                self._counters.runs_cancelled += 1
            else:
                self._counters.runs_failed += 1
            self._counters.input_tokens += result.usage.input_tokens
            self._counters.output_tokens += result.usage.output_tokens
            self._counters.requests += result.usage.requests

    def snapshot(self) -> RunMetricsSnapshot:
        """Get a copy of the current counters."""
        with self._lock:
            return RunMetricsSnapshot(**asdict(self._counters))
