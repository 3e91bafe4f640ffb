"""
Time source and cooperative cancellation used by the arbiter.
"""

import asyncio
import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> float:
        """Current time in milliseconds."""
        ...

    async def sleep(self, ms: float) -> None:
        ...


class SystemClock:
    """Monotonic wall clock backed by the running event loop."""

    def now(self) -> float:
        return time.monotonic() * 1000.0

    async def sleep(self, ms: float) -> None:
        await asyncio.sleep(ms / 1000.0)


class CancellationToken:
    """One-shot flag for a pending delay. Observed by the sleeper on resume."""

    __slots__ = ("_cancelled",)

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    def is_cancelled(self) -> bool:
        return self._cancelled

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self._cancelled})"
