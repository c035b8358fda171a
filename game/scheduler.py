"""Delayed callbacks for the session's timed level-up completion.

The session only needs "run this later, and let me cancel it".  Production
code runs on the asyncio loop that Textual drives, so ``AsyncioScheduler``
wraps ``loop.call_later`` and hands back the ``TimerHandle`` as the
cancellation token.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Protocol


class ScheduledCall(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall: ...


class AsyncioScheduler:
    """Schedules callbacks on the running asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)
