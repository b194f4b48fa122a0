"""
Sysfs Agent - Source Table

The fixed, ordered list of statistics the agent collects. Adding a source
means one entry here plus, if needed, one rule in the reader.
"""

from typing import List

from ..config import SourceSettings
from ..sink.base import HardwareErrorCode, HardwareType, IoOperation
from .base import ParseRule, StatSource


def build_source_table(settings: SourceSettings) -> List[StatSource]:
    """Build the source list in collection order."""
    paths = settings.paths

    def slow_io(name: str, operation: IoOperation) -> StatSource:
        return StatSource(
            name=name,
            path=paths[name],
            rule=ParseRule.COUNTER,
            clear_after_read=True,
            operation=operation,
        )

    return [
        StatSource(
            name="charge_cycles",
            path=paths["charge_cycles"],
            rule=ParseRule.HISTOGRAM,
        ),
        StatSource(
            name="codec_state",
            path=paths["codec_state"],
            rule=ParseRule.FAILURE_FLAG,
            hardware_type=HardwareType.CODEC,
            hardware_location=0,
            error_code=HardwareErrorCode.COMPLETE,
        ),
        slow_io("slowio_read", IoOperation.READ),
        slow_io("slowio_write", IoOperation.WRITE),
        slow_io("slowio_unmap", IoOperation.UNMAP),
        slow_io("slowio_sync", IoOperation.SYNC),
        StatSource(
            name="speaker_impedance",
            path=paths["speaker_impedance"],
            rule=ParseRule.CHANNEL_PAIR,
            scale=settings.impedance_scale,
        ),
    ]
