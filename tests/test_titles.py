"""Session title resolution and caching."""

from unittest.mock import AsyncMock

import pytest

from opencode_notifier.arbiter import EventArbiter
from opencode_notifier.models.events import SessionError, SessionInfoPayload, SessionInfoUpdated
from opencode_notifier.models.session import DEFAULT_TITLE, SessionRecord
from opencode_notifier.session_cache import SessionCache
from opencode_notifier.titles import SessionTitleResolver

from conftest import settle


class TestResolve:

    @pytest.mark.asyncio
    async def test_no_session_id_returns_default_without_lookup(self):
        lookup = AsyncMock()
        resolver = SessionTitleResolver(lookup=lookup)
        record = await resolver.resolve(None)
        assert record == SessionRecord(title=DEFAULT_TITLE)
        assert record.parent_id is None
        lookup.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cache_hit_skips_lookup(self):
        cache = SessionCache()
        cache.set("s1", SessionRecord(title="Cached", parent_id="p"))
        lookup = AsyncMock()
        resolver = SessionTitleResolver(cache=cache, lookup=lookup)
        record = await resolver.resolve("s1")
        assert record.title == "Cached"
        assert record.parent_id == "p"
        lookup.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_lookup_success_is_cached(self):
        lookup = AsyncMock(return_value={"id": "s1", "title": "Research", "parentID": "root", "extra": 1})
        resolver = SessionTitleResolver(lookup=lookup)
        first = await resolver.resolve("s1")
        second = await resolver.resolve("s1")
        assert first == second == SessionRecord(title="Research", parent_id="root")
        lookup.assert_awaited_once_with("s1")

    @pytest.mark.asyncio
    async def test_missing_title_falls_back_but_keeps_parent(self):
        lookup = AsyncMock(return_value={"id": "s1", "parentID": "root"})
        resolver = SessionTitleResolver(lookup=lookup)
        record = await resolver.resolve("s1")
        assert record.title == DEFAULT_TITLE
        assert record.parent_id == "root"
        assert resolver.cache.get("s1") is not None

    @pytest.mark.asyncio
    async def test_lookup_failure_is_not_cached(self):
        lookup = AsyncMock(side_effect=[RuntimeError("boom"), {"id": "s1", "title": "Later"}])
        resolver = SessionTitleResolver(lookup=lookup)
        assert (await resolver.resolve("s1")).title == DEFAULT_TITLE
        assert resolver.cache.get("s1") is None
        assert (await resolver.resolve("s1")).title == "Later"
        assert lookup.await_count == 2

    @pytest.mark.asyncio
    async def test_lookup_returning_nothing_is_a_miss(self):
        lookup = AsyncMock(return_value=None)
        resolver = SessionTitleResolver(lookup=lookup)
        assert (await resolver.resolve("s1")).title == DEFAULT_TITLE
        assert resolver.cache.get("s1") is None

    @pytest.mark.asyncio
    async def test_malformed_lookup_payload_is_a_failure(self):
        lookup = AsyncMock(return_value={"title": 42})
        resolver = SessionTitleResolver(lookup=lookup)
        assert (await resolver.resolve("s1")).title == DEFAULT_TITLE
        assert resolver.cache.get("s1") is None

    @pytest.mark.asyncio
    async def test_no_lookup_returns_default(self):
        resolver = SessionTitleResolver()
        assert (await resolver.resolve("s1")).title == DEFAULT_TITLE


class TestLookupErrorReporting:

    @pytest.mark.asyncio
    async def test_failure_is_reported(self):
        report = AsyncMock()
        error = RuntimeError("offline")
        resolver = SessionTitleResolver(lookup=AsyncMock(side_effect=error), on_lookup_error=report)
        await resolver.resolve("s1")
        await settle()
        report.assert_awaited_once_with("s1", error)

    @pytest.mark.asyncio
    async def test_report_failure_is_swallowed(self):
        report = AsyncMock(side_effect=RuntimeError("toast failed"))
        resolver = SessionTitleResolver(lookup=AsyncMock(side_effect=RuntimeError("x")), on_lookup_error=report)
        assert (await resolver.resolve("s1")).title == DEFAULT_TITLE
        await settle()
        report.assert_awaited_once()


class TestRemember:

    def test_remember_overwrites(self):
        resolver = SessionTitleResolver()
        resolver.remember("s1", "Old")
        resolver.remember("s1", "New", "root")
        assert resolver.cache.get("s1") == SessionRecord(title="New", parent_id="root")

    def test_remember_without_title_uses_default(self):
        resolver = SessionTitleResolver()
        assert resolver.remember("s1", None).title == DEFAULT_TITLE

    def test_info_without_title_keeps_cached_title(self):
        resolver = SessionTitleResolver()
        resolver.remember("s1", "Refactor", "root")
        record = resolver.remember("s1", None)
        assert record == SessionRecord(title="Refactor", parent_id="root")
        assert resolver.cache.get("s1") == record

    @pytest.mark.asyncio
    async def test_untitled_info_update_keeps_title_for_notifications(self, clock):
        arbiter = EventArbiter(resolver=SessionTitleResolver(lookup=AsyncMock()), clock=clock)
        await arbiter.handle(SessionInfoUpdated(session_id="s1", info=SessionInfoPayload(id="s1", title="Docs")))
        await arbiter.handle(SessionInfoUpdated(session_id="s1", info=SessionInfoPayload(id="s1")))
        decision = await arbiter.handle(SessionError(session_id="s1"))
        assert decision.session_title == "Docs"
