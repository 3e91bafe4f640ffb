"""
Event arbiter: decides whether each inbound event becomes a notification.

Race handling:
- An error within RACE_CONDITION_DEBOUNCE_MS suppresses a following idle.
- An idle is held for IDLE_GRACE_MS; an error arriving meanwhile cancels it and is itself
  dropped (abort shows up as idle immediately followed by error).
- An error within RACE_CONDITION_DEBOUNCE_MS of an emitted idle notification is dropped.

Handler calls may overlap: state lives on the instance, shared by every in-flight call.
"""

import logging
from typing import Optional

from opencode_notifier.clock import CancellationToken, Clock, SystemClock
from opencode_notifier.debug_log import log_event
from opencode_notifier.models.decision import Classification, NotificationDecision
from opencode_notifier.models.events import (
    AnyInboundEvent,
    InboundEvent,
    PermissionAsked,
    SessionError,
    SessionInfoUpdated,
    SessionStatus,
    StatusType,
)
from opencode_notifier.titles import SessionTitleResolver

logger = logging.getLogger("opencode_notifier.arbiter")

RACE_CONDITION_DEBOUNCE_MS = 150.0
IDLE_GRACE_MS = 150.0


class ArbiterState:
    __slots__ = ("last_error_at", "last_idle_notification_at", "pending_idle_cancel")

    def __init__(self) -> None:
        self.last_error_at: Optional[float] = None
        self.last_idle_notification_at: Optional[float] = None
        self.pending_idle_cancel: Optional[CancellationToken] = None

    def __repr__(self) -> str:
        return (
            f"ArbiterState(last_error_at={self.last_error_at!r}, "
            f"last_idle_notification_at={self.last_idle_notification_at!r}, "
            f"pending={self.pending_idle_cancel is not None})"
        )


class EventArbiter:
    def __init__(
        self,
        resolver: Optional[SessionTitleResolver] = None,
        clock: Optional[Clock] = None,
        debounce_ms: float = RACE_CONDITION_DEBOUNCE_MS,
        grace_ms: float = IDLE_GRACE_MS,
    ):
        self.resolver = resolver or SessionTitleResolver()
        self.clock: Clock = clock or SystemClock()
        self.debounce_ms = debounce_ms
        self.grace_ms = grace_ms
        self.state = ArbiterState()

    @property
    def idle_pending(self) -> bool:
        return self.state.pending_idle_cancel is not None

    async def handle(self, event: AnyInboundEvent) -> Optional[NotificationDecision]:
        """Arbitrate one event. Returns the decision to dispatch, or None when suppressed."""
        self._remember_info(event)

        if isinstance(event, SessionInfoUpdated):
            return None

        if isinstance(event, PermissionAsked):
            record = await self.resolver.resolve(event.session_id)
            return NotificationDecision(classification=Classification.PERMISSION, session_title=record.title)

        if isinstance(event, SessionStatus):
            if event.status is StatusType.IDLE:
                return await self._handle_idle(event)
            return None

        if isinstance(event, SessionError):
            return await self._handle_error(event)

        return None

    def _remember_info(self, event: InboundEvent) -> None:
        info = event.info
        if info is not None and info.id:
            self.resolver.remember(info.id, info.title, info.parent_id)

    def _within(self, since: Optional[float], now: float) -> bool:
        return since is not None and now - since < self.debounce_ms

    async def _handle_idle(self, event: SessionStatus) -> Optional[NotificationDecision]:
        state = self.state
        now = self.clock.now()
        if self._within(state.last_error_at, now):
            log_event(
                "skipIdleAfterError",
                timeSinceError=now - state.last_error_at,  # type: ignore[operator]
                reason="Idle event following error - skipping both notifications (cancellation)",
            )
            return None

        record = await self.resolver.resolve(event.session_id)
        if state.last_error_at is not None and state.last_error_at >= now:
            log_event(
                "skipIdleAfterError",
                timeSinceError=self.clock.now() - state.last_error_at,
                reason="Error arrived during session lookup - skipping idle notification",
            )
            return None

        classification = Classification.COMPLETION
        if record.parent_id:
            classification = Classification.DELEGATED_COMPLETION
            log_event("subagentDetected", sessionID=event.session_id, parentID=record.parent_id)

        # Arm
        token = CancellationToken()
        if state.pending_idle_cancel is not None:
            logger.debug("Replacing pending idle notification")
        state.pending_idle_cancel = token

        await self.clock.sleep(self.grace_ms)

        # Re-validate
        if state.pending_idle_cancel is token:
            state.pending_idle_cancel = None
        if token.is_cancelled():
            return None

        after = self.clock.now()
        if self._within(state.last_error_at, after):
            log_event(
                "skipIdleAfterError",
                timeSinceError=after - state.last_error_at,  # type: ignore[operator]
                reason="Idle notification cancelled - error detected during delay (cancellation)",
            )
            return None

        state.last_idle_notification_at = after
        return NotificationDecision(classification=classification, session_title=record.title)

    async def _handle_error(self, event: SessionError) -> Optional[NotificationDecision]:
        state = self.state
        now = self.clock.now()

        if state.pending_idle_cancel is not None:
            log_event(
                "cancelPendingIdle",
                reason="Error occurred while idle notification was pending (cancellation)",
            )
            state.pending_idle_cancel.cancel()
            state.pending_idle_cancel = None
            return None

        if self._within(state.last_idle_notification_at, now):
            log_event(
                "skipErrorAfterIdleNotification",
                timeSinceIdleNotification=now - state.last_idle_notification_at,  # type: ignore[operator]
                reason="Error notification skipped - idle notification just happened (cancellation)",
            )
            return None

        state.last_error_at = now
        record = await self.resolver.resolve(event.session_id)
        return NotificationDecision(classification=Classification.ERROR, session_title=record.title)
