"""Escalating policy for unexpected failures.

Each failure recovered at the request boundary is counted process-wide.
While the count stays at or below the threshold the process keeps
serving; the failure that pushes it past the threshold terminates the
process so a supervisor can restart it in a clean state.
"""

import enum
import logging
import os
import threading
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GovernorState(str, enum.Enum):
    RUNNING = "running"
    TERMINAL = "terminal"


@dataclass(frozen=True)
class FailureTally:
    """Counter value observed by one increment, and the state it implies."""

    count: int
    state: GovernorState


@dataclass(frozen=True)
class UnexpectedFailure:
    """An exception recovered by FailureGovernor.guard."""

    error: Exception
    count: int
    state: GovernorState


class FailureCounter:
    """Process-wide failure count with an atomic increment-and-compare."""

    def __init__(self, threshold: int) -> None:
        if threshold < 0:
            raise ValueError("threshold must not be negative")
        self._threshold = threshold
        self._count = 0
        self._lock = threading.Lock()

    @property
    def threshold(self) -> int:
        return self._threshold

    @property
    def value(self) -> int:
        with self._lock:
            return self._count

    def increment_and_check(self) -> FailureTally:
        """Add one failure; TERMINAL once the count exceeds the threshold."""
        with self._lock:
            self._count += 1
            count = self._count
        state = GovernorState.TERMINAL if count > self._threshold else GovernorState.RUNNING
        return FailureTally(count=count, state=state)

    def reset(self) -> int:
        """Zero the count and return the value it had."""
        with self._lock:
            previous, self._count = self._count, 0
        return previous


def _exit_process(code: int) -> None:
    """Flush log handlers, then exit without unwinding the event loop."""
    logging.shutdown()
    os._exit(code)


class FailureGovernor:
    """Runs request work, recovering and counting unexpected exceptions."""

    def __init__(
        self,
        counter: FailureCounter,
        terminate: Callable[[int], None] = _exit_process,
    ) -> None:
        self.counter = counter
        self._terminate = terminate
        self._terminated = threading.Event()

    @property
    def terminated(self) -> bool:
        return self._terminated.is_set()

    async def guard(
        self,
        work: Callable[[], Awaitable[T]],
        *,
        method: str = "",
        path: str = "",
    ) -> T | UnexpectedFailure:
        """Await work(); an Exception is logged, counted and returned instead of raised.

        Cancellation is not an Exception and propagates unchanged.
        """
        try:
            return await work()
        except Exception as exc:
            tally = self.counter.increment_and_check()
            logger.error(
                "Unexpected failure %d/%d during %s %s: %s",
                tally.count,
                self.counter.threshold,
                method,
                path,
                exc,
                exc_info=exc,
            )
            if tally.state is GovernorState.TERMINAL:
                self._escalate(tally)
            return UnexpectedFailure(error=exc, count=tally.count, state=tally.state)

    def _escalate(self, tally: FailureTally) -> None:
        logger.critical(
            "Failure count %d exceeded threshold %d; terminating process",
            tally.count,
            self.counter.threshold,
        )
        self._terminated.set()
        self._terminate(1)
