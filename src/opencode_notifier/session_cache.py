"""
Session title cache. Entries are never evicted.
"""

from typing import Optional

from opencode_notifier.models.session import SessionRecord


class SessionCache:
    def __init__(self) -> None:
        self._records: dict[str, SessionRecord] = {}

    def set(self, session_id: str, record: SessionRecord) -> None:
        self._records[session_id] = record

    def get(self, session_id: str) -> Optional[SessionRecord]:
        return self._records.get(session_id)
