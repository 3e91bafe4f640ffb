"""
Notifier: the host-facing event handler.

Wires the arbiter, title resolver and dispatcher together. `event()` may be called
again while earlier calls are still suspended, and never raises.
"""

import logging
from typing import Any, Optional

from opencode_notifier.arbiter import EventArbiter
from opencode_notifier.clock import Clock
from opencode_notifier.config import NotifierConfig, load_config
from opencode_notifier.debug_log import log_event
from opencode_notifier.dispatch import Dispatcher, PlaySound, RunCommand, SendNotification
from opencode_notifier.models.decision import NotificationDecision
from opencode_notifier.models.events import parse_event
from opencode_notifier.session_cache import SessionCache
from opencode_notifier.titles import SessionLookup, SessionTitleResolver
from opencode_notifier.transport.http import HostClient

logger = logging.getLogger("opencode_notifier.plugin")


class Notifier:
    def __init__(
        self,
        config: Optional[NotifierConfig] = None,
        lookup: Optional[SessionLookup] = None,
        host: Optional[HostClient] = None,
        clock: Optional[Clock] = None,
        cache: Optional[SessionCache] = None,
        send_notification: Optional[SendNotification] = None,
        play_sound: Optional[PlaySound] = None,
        run_command: Optional[RunCommand] = None,
    ):
        self.config = config if config is not None else load_config()
        self._host = host
        if lookup is None and host is not None:
            lookup = host.get_session

        self.resolver = SessionTitleResolver(
            cache=cache,
            lookup=lookup,
            on_lookup_error=self._toast_lookup_error if host is not None else None,
        )
        self.arbiter = EventArbiter(resolver=self.resolver, clock=clock)
        self.dispatcher = Dispatcher(
            self.config,
            send_notification=send_notification,
            play_sound=play_sound,
            run_command=run_command,
            report_failure=self._toast if host is not None else None,
        )

        log_event(
            "pluginInit",
            configLoaded=True,
            config=self.config.model_dump(mode="json", exclude={"command"}),
        )

    async def event(self, raw: Any) -> Optional[NotificationDecision]:
        """Handle one host event. Returns the dispatched decision, if any."""
        try:
            log_event("eventReceived", eventType=raw.get("type") if isinstance(raw, dict) else None, event=raw)
            event = parse_event(raw)
            if event is None:
                return None
            decision = await self.arbiter.handle(event)
            if decision is None:
                return None
            await self.dispatcher.dispatch(decision)
            return decision
        except Exception:
            logger.exception("Unhandled error while processing event")
            return None

    async def _toast(self, message: str) -> None:
        await self._host.show_toast(message, variant="warning")  # type: ignore[union-attr]

    async def _toast_lookup_error(self, session_id: str, _error: BaseException) -> None:
        await self._toast(f"Notifier failed to lookup session: {session_id}")


def create_notifier(
    config: Optional[NotifierConfig] = None,
    host: Optional[HostClient] = None,
    **kwargs: Any,
) -> Notifier:
    """Plugin factory. Loads the user config when none is given."""
    return Notifier(config=config, host=host, **kwargs)
