"""
REST + event stream client for the opencode server.

GET  /session/{id}     session info (title, parentID)
POST /tui/show-toast   diagnostic toast in the TUI
GET  /event            server-sent event stream
"""

import json
import logging
from typing import Any, AsyncIterator, Optional

import httpx

from opencode_notifier.errors import NotifierError, SessionLookupError

logger = logging.getLogger("opencode_notifier.transport.http")

DEFAULT_BASE_URL = "http://127.0.0.1:4096"


class HostClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        directory: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        params = {"directory": directory} if directory else None
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={"User-Agent": "opencode-notifier/0.1.0", "Accept": "application/json"},
            params=params,
            timeout=timeout,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @staticmethod
    def _check(resp: httpx.Response) -> None:
        if resp.status_code >= 400:
            raise NotifierError("http_error", f"HTTP {resp.status_code}: {resp.text[:200]}")

    async def get(self, path: str) -> Any:
        resp = await self._client.get(path)
        self._check(resp)
        return resp.json()

    async def post(self, path: str, body: Optional[dict[str, Any]] = None) -> Any:
        resp = await self._client.post(path, json=body)
        self._check(resp)
        if not resp.content:
            return None
        return resp.json()

    async def get_session(self, session_id: str) -> dict[str, Any]:
        """Session lookup collaborator for the title resolver."""
        try:
            data = await self.get(f"/session/{session_id}")
        except (httpx.HTTPError, NotifierError, ValueError) as e:
            raise SessionLookupError(f"Failed to look up session {session_id}: {e}", details={"session_id": session_id})
        if not isinstance(data, dict):
            raise SessionLookupError(f"Unexpected session payload for {session_id}")
        return data

    async def show_toast(self, message: str, variant: str = "warning", duration_ms: int = 3000) -> None:
        await self.post("/tui/show-toast", {"message": message, "variant": variant, "duration": duration_ms})

    async def events(self) -> AsyncIterator[dict[str, Any]]:
        """Yield decoded events from the server-sent event stream until it closes."""
        async with self._client.stream("GET", "/event", timeout=None, headers={"Accept": "text/event-stream"}) as resp:
            if resp.status_code >= 400:
                await resp.aread()
                self._check(resp)
            data_lines: list[str] = []
            async for line in resp.aiter_lines():
                if line.startswith("data:"):
                    data_lines.append(line[5:].lstrip())
                    continue
                if line or not data_lines:
                    continue
                payload = "\n".join(data_lines)
                data_lines = []
                try:
                    event = json.loads(payload)
                except json.JSONDecodeError:
                    logger.debug(f"Skipping undecodable event: {payload[:200]}")
                    continue
                if isinstance(event, dict):
                    yield event

    async def close(self) -> None:
        await self._client.aclose()
