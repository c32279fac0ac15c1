"""Custom exceptions for LocaleLeap."""

from typing import Any, Optional


class LocaleLeapError(Exception):
    """Base exception for LocaleLeap."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class InvalidUrl(LocaleLeapError):
    """URL could not be parsed as an absolute http(s)-style URL."""

    def __init__(
        self,
        url: str,
        reason: str = "not an absolute URL",
        context: Optional[dict[str, Any]] = None,
    ):
        message = f"Invalid URL {url!r}: {reason}"
        super().__init__(message, context)
        self.url = url
        self.reason = reason


class ProbeUnreachable(LocaleLeapError):
    """
    Negative reachability signal.

    Raised and caught inside the probe only. Callers always see a boolean.
    """

    def __init__(
        self,
        url: str,
        reason: str,
        context: Optional[dict[str, Any]] = None,
    ):
        message = f"Unreachable {url}: {reason}"
        super().__init__(message, context)
        self.url = url
        self.reason = reason


class ReentrantDrainIgnored(LocaleLeapError):
    """Drain requested while a drain loop is already running for the entry."""

    def __init__(self, session_id: int, context: Optional[dict[str, Any]] = None):
        message = f"Drain already running for session {session_id}"
        super().__init__(message, context)
        self.session_id = session_id


class InvalidTransition(LocaleLeapError):
    """Illegal navigation phase change."""

    def __init__(
        self,
        session_id: int,
        current: str,
        target: str,
        context: Optional[dict[str, Any]] = None,
    ):
        message = f"Session {session_id}: illegal transition {current} -> {target}"
        super().__init__(message, context)
        self.session_id = session_id
        self.current = current
        self.target = target


class SettingsError(LocaleLeapError):
    """Rejected settings write."""

    pass
