"""
Sysfs Agent - Stat Source Descriptors

A StatSource binds one sysfs node to a parsing rule and a report shape.
The agent builds a fixed list of them at startup and walks it every cycle.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..sink.base import HardwareErrorCode, HardwareType, IoOperation


class ParseRule(str, Enum):
    """How a source's raw text is turned into a report."""
    HISTOGRAM = "histogram"          # whitespace-separated bins -> "a,b,c"
    FAILURE_FLAG = "failure_flag"    # "0" is healthy, anything else failed
    COUNTER = "counter"              # single base-10 integer
    CHANNEL_PAIR = "channel_pair"    # two floats, one per channel


class SourceOutcome(str, Enum):
    """What happened to one source during one cycle."""
    REPORTED = "reported"
    NOTHING_TO_REPORT = "nothing_to_report"
    READ_FAILED = "read_failed"
    PARSE_FAILED = "parse_failed"


@dataclass(frozen=True)
class StatSource:
    """Immutable description of one monitored statistic."""
    name: str
    path: str
    rule: ParseRule
    clear_after_read: bool = False

    # Rule-specific report shape
    operation: Optional[IoOperation] = None
    hardware_type: Optional[HardwareType] = None
    hardware_location: int = 0
    error_code: Optional[HardwareErrorCode] = None
    scale: int = 1

    def to_dict(self) -> dict:
        """Convert to dictionary for logging."""
        return {
            "name": self.name,
            "path": self.path,
            "rule": self.rule.value,
            "clear_after_read": self.clear_after_read,
            "operation": self.operation.name if self.operation is not None else None,
            "hardware_type": self.hardware_type.name if self.hardware_type is not None else None,
            "error_code": self.error_code.name if self.error_code is not None else None,
            "scale": self.scale,
        }
