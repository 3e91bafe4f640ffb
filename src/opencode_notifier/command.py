"""
Custom command hook: runs a user command for each dispatched notification.

Tokens substituted in path and args: {event}, {message}, {sessionTitle}.
"""

import logging
import subprocess
from typing import Optional

from opencode_notifier.config import NotifierConfig
from opencode_notifier.models.decision import Classification

logger = logging.getLogger("opencode_notifier.command")


def substitute_tokens(value: str, classification: Classification, message: str, session_title: Optional[str] = None) -> str:
    return (
        value.replace("{event}", classification.value)
        .replace("{message}", message)
        .replace("{sessionTitle}", session_title or "")
    )


def build_command(
    config: NotifierConfig, classification: Classification, message: str, session_title: Optional[str] = None,
) -> Optional[list[str]]:
    if not config.command.enabled or not config.command.path:
        return None
    path = substitute_tokens(config.command.path, classification, message, session_title)
    args = [substitute_tokens(arg, classification, message, session_title) for arg in config.command.args]
    return [path, *args]


def run_command(
    config: NotifierConfig, classification: Classification, message: str, session_title: Optional[str] = None,
) -> None:
    """Spawn detached and return immediately; spawn errors are logged."""
    cmd = build_command(config, classification, message, session_title)
    if cmd is None:
        return
    try:
        subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as e:
        logger.warning(f"Custom command failed to start ({cmd[0]}): {e}")
