"""
User configuration: ~/.config/opencode/opencode-notifier.json.

The file is JSONC (comments and trailing commas allowed). Loading never raises:
a missing or broken file yields the defaults.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional, Union

import json5
from pydantic import BaseModel, Field

from opencode_notifier.debug_log import log_event
from opencode_notifier.errors import ConfigError
from opencode_notifier.models.decision import Classification

logger = logging.getLogger("opencode_notifier.config")

CONFIG_ENV = "OPENCODE_NOTIFIER_CONFIG"
DEFAULT_TIMEOUT_S = 5
DEFAULT_VOLUME = 1.0

DEFAULT_MESSAGES = {
    Classification.PERMISSION: "OpenCode needs permission",
    Classification.COMPLETION: "OpenCode has finished",
    Classification.ERROR: "OpenCode encountered an error",
    Classification.DELEGATED_COMPLETION: "Subagent task completed",
}


class EventConfig(BaseModel):
    sound: bool = False
    notification: bool = True


class CommandConfig(BaseModel):
    """Custom command run on every dispatched decision."""
    enabled: bool = False
    path: Optional[str] = None
    args: list[str] = Field(default_factory=list)


def _default_events() -> dict[Classification, EventConfig]:
    return {
        Classification.PERMISSION: EventConfig(),
        Classification.COMPLETION: EventConfig(),
        Classification.ERROR: EventConfig(),
        Classification.DELEGATED_COMPLETION: EventConfig(sound=False, notification=False),
    }


def _no_paths() -> dict[Classification, Optional[str]]:
    return {c: None for c in Classification}


class NotifierConfig(BaseModel):
    sound: bool = False
    notification: bool = True
    timeout: float = DEFAULT_TIMEOUT_S
    volume: float = DEFAULT_VOLUME
    events: dict[Classification, EventConfig] = Field(default_factory=_default_events)
    messages: dict[Classification, str] = Field(default_factory=lambda: dict(DEFAULT_MESSAGES))
    sounds: dict[Classification, Optional[str]] = Field(default_factory=_no_paths)
    images: dict[Classification, Optional[str]] = Field(default_factory=_no_paths)
    command: CommandConfig = Field(default_factory=CommandConfig)

    def event(self, classification: Classification) -> EventConfig:
        return self.events.get(classification) or EventConfig(sound=False, notification=False)

    def is_sound_enabled(self, classification: Classification) -> bool:
        return self.event(classification).sound

    def is_notification_enabled(self, classification: Classification) -> bool:
        return self.event(classification).notification

    def message(self, classification: Classification) -> str:
        return self.messages.get(classification, "")

    def sound_path(self, classification: Classification) -> Optional[str]:
        return self.sounds.get(classification)

    def image_path(self, classification: Classification) -> Optional[str]:
        return self.images.get(classification)


def config_path() -> Path:
    override = os.environ.get(CONFIG_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "opencode" / "opencode-notifier.json"


UserEventConfig = Union[bool, dict[str, Any], None]


def _parse_event_config(value: UserEventConfig, default: EventConfig) -> EventConfig:
    if value is None:
        return default
    if isinstance(value, bool):
        return EventConfig(sound=value, notification=value)
    if isinstance(value, dict):
        sound = value.get("sound")
        notification = value.get("notification")
        return EventConfig(
            sound=sound if isinstance(sound, bool) else default.sound,
            notification=notification if isinstance(notification, bool) else default.notification,
        )
    return default


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def _first_str(*values: Any) -> Optional[str]:
    for value in values:
        if isinstance(value, str):
            return value
    return None


def parse_config(data: Any) -> NotifierConfig:
    """Build a NotifierConfig from the decoded user file.

    Per-event keys may also appear at the top level (legacy layout): a bool or
    object there is an event toggle, a string is used as message, sound and image.
    """
    if not isinstance(data, dict):
        raise ConfigError("Invalid config object")

    global_sound = data["sound"] if isinstance(data.get("sound"), bool) else False
    global_notification = data["notification"] if isinstance(data.get("notification"), bool) else True
    default_with_global = EventConfig(sound=global_sound, notification=global_notification)

    timeout = data.get("timeout")
    volume = data.get("volume")
    events = _section(data, "events")
    messages = _section(data, "messages")
    sounds = _section(data, "sounds")
    images = _section(data, "images")

    config = NotifierConfig(
        sound=global_sound,
        notification=global_notification,
        timeout=timeout if isinstance(timeout, (int, float)) and not isinstance(timeout, bool) and timeout > 0 else DEFAULT_TIMEOUT_S,
        volume=volume if isinstance(volume, (int, float)) and not isinstance(volume, bool) and 0 < volume <= 1 else DEFAULT_VOLUME,
    )

    for c in Classification:
        legacy = data.get(c.value)
        legacy_str = legacy if isinstance(legacy, str) else None
        legacy_toggle = legacy if isinstance(legacy, (bool, dict)) else None
        base = config.events[c] if c is Classification.DELEGATED_COMPLETION else default_with_global

        config.events[c] = _parse_event_config(events.get(c.value, legacy_toggle), base)
        config.messages[c] = _first_str(messages.get(c.value), legacy_str, DEFAULT_MESSAGES[c]) or ""
        config.sounds[c] = _first_str(sounds.get(c.value), legacy_str)
        config.images[c] = _first_str(images.get(c.value), legacy_str)

    command = data.get("command")
    if isinstance(command, dict):
        config.command = CommandConfig.model_validate(command)

    return config


def load_config(path: Optional[Path] = None) -> NotifierConfig:
    target = path or config_path()
    log_event("loadConfig", configPath=str(target), exists=target.exists())

    if not target.exists():
        log_event("loadConfig", result="usingDefaultConfig", reason="configFileNotFound")
        return NotifierConfig()

    try:
        return parse_config(json5.loads(target.read_text(encoding="utf-8")))
    except (OSError, ValueError, ConfigError) as e:
        logger.warning(f"Ignoring invalid config at {target}: {e}")
        log_event("loadConfig", result="parseError", error=str(e))
        return NotifierConfig()
