"""
Notifier error types.
"""

from typing import Any, Optional


class NotifierError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class SessionLookupError(NotifierError):
    def __init__(self, message: str, code: str = "session_lookup_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class DispatchError(NotifierError):
    def __init__(self, message: str, code: str = "dispatch_error", details: Optional[dict[str, Any]] = None):
        super().__init__(code, message, details)


class ConfigError(NotifierError):
    def __init__(self, message: str):
        super().__init__("config_error", message)
