"""
Sysfs Agent - Sink Package

Interface to the telemetry service that receives parsed stats.
"""

from .base import HardwareErrorCode, HardwareType, IoOperation, StatsHandle, TelemetrySink
from .socket_sink import SocketSink, SocketStatsHandle

__all__ = [
    "HardwareErrorCode",
    "HardwareType",
    "IoOperation",
    "StatsHandle",
    "TelemetrySink",
    "SocketSink",
    "SocketStatsHandle",
]
