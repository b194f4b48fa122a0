"""
Sysfs Agent - Errors

Exception types for the agent. Only TimerError and ConfigError are fatal;
everything else is caught and logged at the cycle or source level.
"""

from typing import Optional


class AgentError(Exception):
    """Base class for agent errors."""


class ConfigError(AgentError):
    """Configuration file could not be loaded or failed validation."""


class TimerError(AgentError):
    """Periodic trigger could not be armed or waited on."""


class SinkUnavailableError(AgentError):
    """Telemetry sink is not running or refused the connection."""


class SourceError(AgentError):
    """A single stat source could not be sampled this cycle."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class SourceReadError(SourceError):
    """Source file could not be opened or read."""


class SourceParseError(SourceError):
    """Source file content did not match the expected format."""

    def __init__(self, message: str, path: Optional[str] = None, raw: Optional[str] = None):
        super().__init__(message, path)
        self.raw = raw
