from __future__ import annotations

import asyncio

import pytest

from traceback_error.core.poller import Poller, PollerState, block_on


class _Suspends:
    """Awaitable yielding a bare suspension `times` times before returning `value`."""

    def __init__(self, times: int, value: object) -> None:
        self.times = times
        self.value = value

    def __await__(self):
        for _ in range(self.times):
            yield None
        return self.value


class _FlakyFuture:
    def __init__(self, ready_after: int) -> None:
        self.ready_after = ready_after
        self.checks = 0

    def done(self) -> bool:
        self.checks += 1
        return self.checks >= self.ready_after


class _WaitsOn:
    def __init__(self, fut: _FlakyFuture) -> None:
        self.fut = fut
        self.checks_at_resume = -1

    def __await__(self):
        yield self.fut
        self.checks_at_resume = self.fut.checks
        return "woken"


def test_block_on_returns_value_of_ready_coroutine() -> None:
    async def compute() -> int:
        return 42

    assert block_on(compute()) == 42


def test_block_on_repolls_after_sleep_zero() -> None:
    steps: list[str] = []

    async def handler() -> str:
        steps.append("before")
        await asyncio.sleep(0)
        steps.append("after")
        return "done"

    assert block_on(handler()) == "done"
    assert steps == ["before", "after"]


def test_poller_counts_one_poll_per_pending_result() -> None:
    poller = Poller(_Suspends(3, "v"))

    while not poller.poll():
        pass

    assert poller.polls == 4
    assert poller.result == "v"


def test_poller_state_machine() -> None:
    poller = Poller(_Suspends(1, None))
    assert poller.state is PollerState.CREATED

    assert poller.poll() is False
    assert poller.state is PollerState.POLLING

    assert poller.poll() is True
    assert poller.state is PollerState.READY
    # Polling a finished poller stays ready without touching the awaitable again.
    assert poller.poll() is True
    assert poller.polls == 2


def test_pending_future_is_not_resumed_before_done() -> None:
    fut = _FlakyFuture(ready_after=3)
    waiter = _WaitsOn(fut)

    assert block_on(waiter) == "woken"
    assert waiter.checks_at_resume == 3


def test_block_on_propagates_exceptions() -> None:
    async def failing() -> None:
        await asyncio.sleep(0)
        raise ValueError("handler broke")

    with pytest.raises(ValueError, match="handler broke"):
        block_on(failing())


def test_block_on_rejects_non_awaitables() -> None:
    with pytest.raises(TypeError, match="awaitable"):
        block_on(lambda: None)  # type: ignore[arg-type]
