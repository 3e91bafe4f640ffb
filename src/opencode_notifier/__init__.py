"""
opencode-notifier: desktop notifications and sounds for opencode sessions.

Arbitrates racing session events (idle vs error) and labels every
notification with the originating session's title.
"""

from opencode_notifier.arbiter import EventArbiter, RACE_CONDITION_DEBOUNCE_MS, IDLE_GRACE_MS
from opencode_notifier.clock import CancellationToken, Clock, SystemClock
from opencode_notifier.config import NotifierConfig, load_config
from opencode_notifier.dispatch import Dispatcher
from opencode_notifier.errors import NotifierError, SessionLookupError, DispatchError, ConfigError
from opencode_notifier.models.decision import Classification, NotificationDecision
from opencode_notifier.models.events import HostEvent, parse_event
from opencode_notifier.models.session import DEFAULT_TITLE, SessionRecord
from opencode_notifier.plugin import Notifier, create_notifier
from opencode_notifier.session_cache import SessionCache
from opencode_notifier.titles import SessionTitleResolver

__version__ = "0.1.0"
__all__ = [
    "Notifier",
    "create_notifier",
    "EventArbiter",
    "SessionTitleResolver",
    "SessionCache",
    "Dispatcher",
    "NotifierConfig",
    "load_config",
    "Classification",
    "NotificationDecision",
    "SessionRecord",
    "HostEvent",
    "parse_event",
    "Clock",
    "SystemClock",
    "CancellationToken",
    "NotifierError",
    "SessionLookupError",
    "DispatchError",
    "ConfigError",
    "DEFAULT_TITLE",
    "RACE_CONDITION_DEBOUNCE_MS",
    "IDLE_GRACE_MS",
]
