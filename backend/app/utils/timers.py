"""
Timer factories — one-shot cancellable callbacks.

Long-lived components (broadcast coalescer, upstream bridge) take a timer
factory instead of touching the event loop directly so tests can drive
time by hand.
"""
import asyncio
from typing import Any, Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class TimerFactory(Protocol):
    def __call__(self, delay: float, callback: Callable[[], Any]) -> TimerHandle: ...


class LoopTimerFactory:
    """Schedules callbacks on the running asyncio loop via call_later."""

    def __call__(self, delay: float, callback: Callable[[], Any]) -> asyncio.TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)
