"""
Dispatch: turns a decision into a notification, a sound and the custom command.

The notification and sound calls run concurrently and are always both settled;
one failing never blocks or cancels the other.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from opencode_notifier.command import run_command as default_run_command
from opencode_notifier.config import NotifierConfig
from opencode_notifier.debug_log import log_event
from opencode_notifier.models.decision import Classification, NotificationDecision
from opencode_notifier.transport.notify import send_notification as default_send_notification
from opencode_notifier.transport.sound import play_sound as default_play_sound

logger = logging.getLogger("opencode_notifier.dispatch")

TITLE_PLACEHOLDER = "{{title}}"

SendNotification = Callable[[str, float, Optional[str], Optional[str]], Awaitable[None]]
PlaySound = Callable[[Classification, Optional[str], float], Awaitable[None]]
RunCommand = Callable[[NotifierConfig, Classification, str, Optional[str]], None]
FailureReporter = Callable[[str], Awaitable[Any]]


def render_message(template: str, session_title: str) -> str:
    return template.replace(TITLE_PLACEHOLDER, session_title)


class Dispatcher:
    def __init__(
        self,
        config: NotifierConfig,
        send_notification: Optional[SendNotification] = None,
        play_sound: Optional[PlaySound] = None,
        run_command: Optional[RunCommand] = None,
        report_failure: Optional[FailureReporter] = None,
    ):
        self.config = config
        self._send_notification = send_notification or default_send_notification
        self._play_sound = play_sound or default_play_sound
        self._run_command = run_command or default_run_command
        self._report_failure = report_failure
        self._background: set[asyncio.Task[None]] = set()

    async def dispatch(self, decision: NotificationDecision) -> None:
        config = self.config
        classification = decision.classification
        title = decision.session_title
        message = render_message(config.message(classification), title)
        notification_enabled = config.is_notification_enabled(classification)
        sound_enabled = config.is_sound_enabled(classification)

        log_event(
            "handleEvent",
            eventType=classification.value,
            notificationEnabled=notification_enabled,
            soundEnabled=sound_enabled,
            message=message,
            sessionTitle=title,
            customSoundPath=config.sound_path(classification),
            volume=config.volume,
        )

        calls: list[tuple[str, Awaitable[None]]] = []
        if notification_enabled:
            calls.append((
                "notification",
                self._send_notification(message, config.timeout, config.image_path(classification), title),
            ))
        if sound_enabled:
            calls.append(("sound", self._play_sound(classification, config.sound_path(classification), config.volume)))

        try:
            self._run_command(config, classification, message, title)
        except Exception as e:
            logger.warning(f"Custom command failed: {e}")

        if not calls:
            return

        results = await asyncio.gather(*(call for _, call in calls), return_exceptions=True)
        for (kind, _), result in zip(calls, results):
            if isinstance(result, BaseException):
                logger.warning(f"{kind} dispatch failed for {classification.value}: {result}")
                log_event("dispatchError", kind=kind, eventType=classification.value, error=str(result))
                self._report(f"Notifier {kind} failed: {result}")

    def _report(self, message: str) -> None:
        """Best-effort diagnostic to the host; its failures are swallowed."""
        if self._report_failure is None:
            return

        async def _do_report() -> None:
            try:
                await self._report_failure(message)  # type: ignore[misc]
            except Exception as e:
                logger.debug(f"Failure report dropped: {e}")

        task = asyncio.get_running_loop().create_task(_do_report())
        self._background.add(task)
        task.add_done_callback(self._background.discard)
