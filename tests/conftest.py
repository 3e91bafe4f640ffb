"""Shared fixtures: a manually driven clock and recording dispatch collaborators."""

import asyncio
from typing import Any, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from opencode_notifier.config import EventConfig, NotifierConfig
from opencode_notifier.models.decision import Classification


async def settle(rounds: int = 20) -> None:
    """Let every runnable task advance to its next suspension point."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class FakeClock:
    """Clock whose time only moves when the test says so."""

    def __init__(self, start: float = 0.0):
        self.current = start
        self._sleepers: list[tuple[float, asyncio.Future]] = []

    def now(self) -> float:
        return self.current

    async def sleep(self, ms: float) -> None:
        fut = asyncio.get_running_loop().create_future()
        self._sleepers.append((self.current + ms, fut))
        await fut

    def set(self, ms: float) -> None:
        """Jump to an absolute time without waking sleepers."""
        self.current = ms

    async def advance(self, ms: float) -> None:
        self.current += ms
        due = [s for s in self._sleepers if s[0] <= self.current]
        self._sleepers = [s for s in self._sleepers if s[0] > self.current]
        for _, fut in due:
            if not fut.done():
                fut.set_result(None)
        await settle()

    @property
    def sleeping(self) -> int:
        return len(self._sleepers)


def make_config(**overrides: Any) -> NotifierConfig:
    values: dict[str, Any] = {
        "sound": True,
        "notification": True,
        "timeout": 5,
        "volume": 0.5,
        "events": {c: EventConfig(sound=True, notification=True) for c in Classification},
        "messages": {
            Classification.PERMISSION: "Permission required",
            Classification.COMPLETION: "Task complete",
            Classification.ERROR: "Error occurred",
            Classification.DELEGATED_COMPLETION: "Subagent task complete",
        },
    }
    values.update(overrides)
    return NotifierConfig(**values)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def send_notification() -> AsyncMock:
    return AsyncMock(return_value=None)


@pytest.fixture
def play_sound() -> AsyncMock:
    return AsyncMock(return_value=None)


@pytest.fixture
def run_command() -> MagicMock:
    return MagicMock(return_value=None)


@pytest.fixture
def config() -> NotifierConfig:
    return make_config()


def idle_event(session_id: Optional[str] = None, **props: Any) -> dict[str, Any]:
    properties: dict[str, Any] = {"status": {"type": "idle"}, **props}
    if session_id:
        properties["sessionID"] = session_id
    return {"type": "session.status", "properties": properties}


def error_event(session_id: Optional[str] = None, **props: Any) -> dict[str, Any]:
    properties: dict[str, Any] = dict(props)
    if session_id:
        properties["sessionID"] = session_id
    return {"type": "session.error", "properties": properties}
