"""
Host event names, wire models and the typed inbound events the arbiter consumes.

Wire shape: {type, properties?: {sessionID?, status?: {type}, info?: {id, title?, parentID?}}}
Unknown and extra fields are tolerated everywhere.
"""

import logging
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger("opencode_notifier.models.events")


class HostEvent:
    """Event type strings emitted by the opencode host."""
    PERMISSION_ASKED = "permission.asked"
    PERMISSION_UPDATED = "permission.updated"  # legacy name for permission.asked
    SESSION_STATUS = "session.status"
    SESSION_IDLE = "session.idle"  # legacy, predates session.status
    SESSION_ERROR = "session.error"
    SESSION_CREATED = "session.created"
    SESSION_UPDATED = "session.updated"


class StatusType(str, Enum):
    IDLE = "idle"
    BUSY = "busy"


# --- Wire models ---

class StatusPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Optional[str] = None


class SessionInfoPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[str] = None
    title: Optional[str] = None
    parent_id: Optional[str] = Field(default=None, alias="parentID")


class EventProperties(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    session_id: Optional[str] = Field(default=None, alias="sessionID")
    status: Optional[StatusPayload] = None
    info: Optional[SessionInfoPayload] = None


class RawEvent(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str
    properties: Optional[EventProperties] = None


# --- Typed inbound events ---

class InboundEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    session_id: Optional[str] = None
    info: Optional[SessionInfoPayload] = None


class PermissionAsked(InboundEvent):
    pass


class SessionStatus(InboundEvent):
    status: StatusType


class SessionError(InboundEvent):
    pass


class SessionInfoUpdated(InboundEvent):
    title: Optional[str] = None
    parent_id: Optional[str] = None


AnyInboundEvent = Union[PermissionAsked, SessionStatus, SessionError, SessionInfoUpdated]


def parse_event(raw: Any) -> Optional[AnyInboundEvent]:
    """Map a host event dict to a typed inbound event. Returns None if irrelevant or invalid."""
    if not isinstance(raw, dict):
        return None
    try:
        event = RawEvent.model_validate(raw)
    except ValidationError as e:
        logger.debug(f"Dropping malformed event: {e.error_count()} validation errors")
        return None

    props = event.properties or EventProperties()
    info = props.info if props.info and props.info.id else None
    session_id = props.session_id

    if event.type in (HostEvent.PERMISSION_ASKED, HostEvent.PERMISSION_UPDATED):
        return PermissionAsked(session_id=session_id, info=info)

    if event.type == HostEvent.SESSION_STATUS:
        status_type = props.status.type if props.status else None
        if status_type not in (StatusType.IDLE.value, StatusType.BUSY.value):
            return None
        return SessionStatus(session_id=session_id, info=info, status=StatusType(status_type))

    if event.type == HostEvent.SESSION_IDLE:
        return SessionStatus(session_id=session_id, info=info, status=StatusType.IDLE)

    if event.type == HostEvent.SESSION_ERROR:
        return SessionError(session_id=session_id, info=info)

    if event.type in (HostEvent.SESSION_CREATED, HostEvent.SESSION_UPDATED):
        if info is None:
            return None
        return SessionInfoUpdated(
            session_id=info.id,
            info=info,
            title=info.title,
            parent_id=info.parent_id,
        )

    return None
