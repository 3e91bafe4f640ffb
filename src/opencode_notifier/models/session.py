"""
Session models: cached title records and host lookup results.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TITLE = "OpenCode"


class SessionRecord(BaseModel):
    """Last-known display data for one session."""
    model_config = ConfigDict(frozen=True)

    title: str = DEFAULT_TITLE
    parent_id: Optional[str] = None


class SessionLookupResult(BaseModel):
    """Subset of the host's session object (GET /session/{id})."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = None
    title: Optional[str] = None
    parent_id: Optional[str] = Field(default=None, alias="parentID")
