"""Shared fixtures: a manually-driven scheduler for timed completions."""
from __future__ import annotations

from typing import Callable

import pytest


class FakeCall:
    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Collects delayed callbacks and fires them when time is advanced."""

    def __init__(self) -> None:
        self.now = 0.0
        self.calls: list[FakeCall] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> FakeCall:
        call = FakeCall(self.now + delay, callback)
        self.calls.append(call)
        return call

    @property
    def pending(self) -> list[FakeCall]:
        return [c for c in self.calls if not c.cancelled]

    def advance(self, seconds: float) -> None:
        self.now += seconds
        due = sorted((c for c in self.pending if c.due <= self.now), key=lambda c: c.due)
        for call in due:
            self.calls.remove(call)
            call.callback()


@pytest.fixture()
def scheduler() -> FakeScheduler:
    return FakeScheduler()
