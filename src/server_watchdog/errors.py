"""
Exceptions raised by the watchdog.

Only ConfigurationError is allowed to reach the process level, and only
during startup. Everything else is handled by the component that raised it.
"""


class WatchdogError(Exception):
    """Base class for watchdog errors."""
    pass


class ConfigurationError(WatchdogError):
    """Raised when a required configuration value is missing or invalid."""
    pass


class MailDispatchError(WatchdogError):
    """Raised by a mail transport when a single message could not be delivered."""

    def __init__(self, recipient: str, reason: str) -> None:
        self.recipient = recipient
        self.reason = reason
        super().__init__(f"Could not deliver alert to {recipient}: {reason}")
