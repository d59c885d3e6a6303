"""Tests for the failure counter and governor escalation policy."""

import asyncio
import logging
import threading

import pytest

from accounts.core.failure_governor import (
    FailureCounter,
    FailureGovernor,
    GovernorState,
    UnexpectedFailure,
)


class Recorder:
    def __init__(self) -> None:
        self.codes: list[int] = []

    def __call__(self, code: int) -> None:
        self.codes.append(code)


async def _boom() -> None:
    raise RuntimeError("boom")


def test_counter_stays_running_up_to_threshold() -> None:
    counter = FailureCounter(10)
    tallies = [counter.increment_and_check() for _ in range(10)]
    assert [t.count for t in tallies] == list(range(1, 11))
    assert all(t.state is GovernorState.RUNNING for t in tallies)


def test_counter_turns_terminal_past_threshold() -> None:
    counter = FailureCounter(10)
    for _ in range(10):
        counter.increment_and_check()
    tally = counter.increment_and_check()
    assert tally.count == 11
    assert tally.state is GovernorState.TERMINAL


def test_counter_reset_returns_previous_value() -> None:
    counter = FailureCounter(3)
    counter.increment_and_check()
    counter.increment_and_check()
    assert counter.reset() == 2
    assert counter.value == 0


def test_counter_rejects_negative_threshold() -> None:
    with pytest.raises(ValueError):
        FailureCounter(-1)


def test_counter_increments_are_atomic_across_threads() -> None:
    """Every increment is observed exactly once; exactly one caller sees threshold+1."""
    counter = FailureCounter(100)
    seen: list[int] = []
    lock = threading.Lock()

    def worker() -> None:
        for _ in range(50):
            tally = counter.increment_and_check()
            with lock:
                seen.append(tally.count)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert counter.value == 400
    assert sorted(seen) == list(range(1, 401))
    assert seen.count(101) == 1


async def test_guard_returns_result_of_successful_work() -> None:
    governor = FailureGovernor(FailureCounter(10), terminate=Recorder())

    async def work() -> str:
        return "done"

    assert await governor.guard(work) == "done"
    assert governor.counter.value == 0


async def test_guard_recovers_and_counts_failure(caplog) -> None:
    recorder = Recorder()
    governor = FailureGovernor(FailureCounter(10), terminate=recorder)
    with caplog.at_level(logging.ERROR, logger="accounts.core.failure_governor"):
        outcome = await governor.guard(_boom, method="GET", path="/x")
    assert isinstance(outcome, UnexpectedFailure)
    assert isinstance(outcome.error, RuntimeError)
    assert outcome.count == 1
    assert outcome.state is GovernorState.RUNNING
    assert recorder.codes == []
    assert any(r.exc_info for r in caplog.records)


async def test_eleventh_failure_terminates_with_exit_code_1(caplog) -> None:
    recorder = Recorder()
    governor = FailureGovernor(FailureCounter(10), terminate=recorder)
    for _ in range(10):
        await governor.guard(_boom)
    assert recorder.codes == []
    assert not governor.terminated

    with caplog.at_level(logging.CRITICAL, logger="accounts.core.failure_governor"):
        outcome = await governor.guard(_boom)

    assert outcome.state is GovernorState.TERMINAL
    assert recorder.codes == [1]
    assert governor.terminated
    assert any(r.levelno == logging.CRITICAL for r in caplog.records)


async def test_concurrent_failures_are_all_counted() -> None:
    recorder = Recorder()
    governor = FailureGovernor(FailureCounter(5), terminate=recorder)
    outcomes = await asyncio.gather(*(governor.guard(_boom) for _ in range(8)))
    assert sorted(o.count for o in outcomes) == list(range(1, 9))
    # Counts 6, 7 and 8 are all past the threshold.
    assert recorder.codes == [1, 1, 1]


async def test_cancellation_is_not_counted() -> None:
    governor = FailureGovernor(FailureCounter(10), terminate=Recorder())

    async def cancelled() -> None:
        raise asyncio.CancelledError()

    with pytest.raises(asyncio.CancelledError):
        await governor.guard(cancelled)
    assert governor.counter.value == 0
