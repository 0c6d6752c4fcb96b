"""
Error taxonomy shared by the resolver, the properties reader and the notifiers.

Only ``main`` turns these into exit codes; library code raises them.
"""
from typing import Optional


class PortMonitorError(Exception):
    """Base class for every error raised by portmonitor."""


class ConfigError(PortMonitorError):
    """The run cannot start because its configuration is unusable."""


class NotAnInteger(ConfigError):
    def __init__(self, token: str, context: Optional[str] = None):
        self.token = token
        self.context = context
        message = f"'{token}' is not an integer"
        if context:
            message += f" ({context})"
        super().__init__(message + ".")


class NotARange(ConfigError):
    def __init__(self, value: str, selector: Optional[str] = None):
        self.value = value
        self.selector = selector
        if selector and selector != value:
            message = f"Configured port range '{value}' of '{selector}' is not a range."
        else:
            message = f"Configured port range '{value}' is not a range."
        super().__init__(message)


class MissingProperty(ConfigError):
    def __init__(self, key: str, what: str = "value"):
        self.key = key
        super().__init__(f"There is no {what} configured for '{key}' in properties file.")


class NoPortSpecification(ConfigError):
    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message
            or "It is necessary to specify a port range, a port list or a start and an end port."
        )


class InvalidPortSpecification(ConfigError):
    """Parsed ports violate the plan's constraints (bounds, ordering)."""


class FileUnreadable(ConfigError):
    def __init__(self, filename: str, reason: Optional[str] = None):
        self.filename = filename
        message = f"The properties file '{filename}' is not readable."
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class NotificationFailure(PortMonitorError):
    """A webhook sink could not deliver its message. Logged, never fatal."""
