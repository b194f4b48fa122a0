"""
Sysfs Agent - Sink Interface

The telemetry sink is the out-of-process service that receives parsed stats.
A sink hands out one handle per collection cycle; every report goes through
that handle and none of the report calls return an acknowledgment.
"""

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Optional


class HardwareType(IntEnum):
    """Component tag for hardware failure reports."""
    UNKNOWN = 0
    MICROPHONE = 1
    CODEC = 2
    SPEAKER = 3
    FINGERPRINT = 4


class HardwareErrorCode(IntEnum):
    """Error code for hardware failure reports."""
    UNKNOWN = 0
    COMPLETE = 1
    SPEAKER_HIGH_Z = 2
    SPEAKER_SHORT = 3
    FINGERPRINT_SENSOR_BROKEN = 4
    FINGERPRINT_TOO_MANY_CORRUPT_ERRORS = 5
    FINGERPRINT_TOO_MANY_DEAD_PIXELS = 6


class IoOperation(IntEnum):
    """Storage operation kind for slow-I/O reports."""
    UNKNOWN = 0
    READ = 1
    WRITE = 2
    UNMAP = 3
    SYNC = 4


class StatsHandle(ABC):
    """A live connection to the sink, valid for one cycle."""

    @abstractmethod
    async def report_charge_cycles(self, buckets: str) -> None:
        """Report the battery charge-cycle histogram as a comma-separated string."""

    @abstractmethod
    async def report_hardware_failed(
        self,
        hardware_type: HardwareType,
        hardware_location: int,
        error_code: HardwareErrorCode
    ) -> None:
        """Report a hardware component failure."""

    @abstractmethod
    async def report_slow_io(self, operation: IoOperation, count: int) -> None:
        """Report the number of slow storage operations of one kind."""

    @abstractmethod
    async def report_speaker_impedance(self, speaker_location: int, milliohms: int) -> None:
        """Report the measured impedance of one speaker channel."""


class TelemetrySink(ABC):
    """Source of per-cycle handles to the telemetry service."""

    @abstractmethod
    async def acquire(self) -> Optional[StatsHandle]:
        """Return a handle, or None if the service is not currently running."""

    @abstractmethod
    async def release(self, handle: StatsHandle) -> None:
        """Give the handle back. Must be idempotent and must not raise."""
