"""
Session title resolution: cache first, one host lookup on miss, default title on any failure.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Mapping, Optional

from opencode_notifier.debug_log import log_event
from opencode_notifier.models.session import DEFAULT_TITLE, SessionLookupResult, SessionRecord
from opencode_notifier.session_cache import SessionCache

logger = logging.getLogger("opencode_notifier.titles")

SessionLookup = Callable[[str], Awaitable[Optional[Mapping[str, Any]]]]
LookupErrorReporter = Callable[[str, BaseException], Awaitable[None]]

_FALLBACK = SessionRecord(title=DEFAULT_TITLE)


class SessionTitleResolver:
    def __init__(
        self,
        cache: Optional[SessionCache] = None,
        lookup: Optional[SessionLookup] = None,
        on_lookup_error: Optional[LookupErrorReporter] = None,
    ):
        self.cache = cache if cache is not None else SessionCache()
        self._lookup = lookup
        self._on_lookup_error = on_lookup_error
        self._background: set[asyncio.Task[None]] = set()

    def remember(self, session_id: str, title: Optional[str], parent_id: Optional[str] = None) -> SessionRecord:
        """Store what the host told us about a session. Missing fields keep their cached values."""
        previous = self.cache.get(session_id)
        if previous is not None:
            title = title or previous.title
            parent_id = parent_id or previous.parent_id
        record = SessionRecord(title=title or DEFAULT_TITLE, parent_id=parent_id)
        self.cache.set(session_id, record)
        return record

    async def resolve(self, session_id: Optional[str]) -> SessionRecord:
        if not session_id:
            return _FALLBACK

        cached = self.cache.get(session_id)
        if cached is not None:
            return cached

        if self._lookup is None:
            return _FALLBACK

        try:
            raw = await self._lookup(session_id)
            if raw is None:
                log_event("sessionLookupMiss", sessionID=session_id)
                return _FALLBACK
            found = SessionLookupResult.model_validate(dict(raw))
        except Exception as e:
            logger.warning(f"Session lookup failed for {session_id}: {e}")
            log_event("sessionLookupError", sessionID=session_id, error=str(e))
            self._report(session_id, e)
            return _FALLBACK

        return self.remember(session_id, found.title, found.parent_id)

    def _report(self, session_id: str, error: BaseException) -> None:
        """Fire-and-forget diagnostic; its own failures are swallowed."""
        if self._on_lookup_error is None:
            return

        async def _do_report() -> None:
            try:
                await self._on_lookup_error(session_id, error)  # type: ignore[misc]
            except Exception as e:
                logger.debug(f"Lookup error report failed: {e}")

        task = asyncio.get_running_loop().create_task(_do_report())
        self._background.add(task)
        task.add_done_callback(self._background.discard)
