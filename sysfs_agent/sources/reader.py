"""
Sysfs Agent - Stat Source Reader

Reads one StatSource, parses it according to its rule and reports the result
through the cycle's sink handle. Clear-on-read counters are reset afterwards.
"""

from pathlib import Path
from typing import Awaitable, Callable, Dict

import structlog

from ..errors import SourceParseError, SourceReadError
from ..sink.base import StatsHandle
from .base import ParseRule, SourceOutcome, StatSource
from .parsers import (
    parse_channel_pair,
    parse_counter,
    parse_failure_flag,
    parse_histogram,
    scale_value,
)

logger = structlog.get_logger(__name__)

RuleHandler = Callable[[StatSource, str, StatsHandle], Awaitable[SourceOutcome]]


def read_source(path: str) -> str:
    """Read the whole text content of a sysfs node."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(str(e), path=path) from e


def clear_source(path: str) -> bool:
    """Reset a counter node to zero. Returns False if the write failed."""
    try:
        Path(path).write_text("0", encoding="utf-8")
    except OSError as e:
        logger.error("Unable to clear counter", path=path, error=str(e))
        return False
    return True


class SourceReader:
    """Applies each source's parsing rule and emits its reports."""

    def __init__(self):
        self._handlers: Dict[ParseRule, RuleHandler] = {
            ParseRule.HISTOGRAM: self._report_histogram,
            ParseRule.FAILURE_FLAG: self._report_failure_flag,
            ParseRule.COUNTER: self._report_counter,
            ParseRule.CHANNEL_PAIR: self._report_channel_pair,
        }

    async def read(self, source: StatSource, handle: StatsHandle) -> SourceOutcome:
        """Sample one source and report it. Never raises for bad input."""
        try:
            raw = read_source(source.path)
        except SourceReadError as e:
            logger.error("Unable to read source", source=source.name, path=source.path, error=str(e))
            return SourceOutcome.READ_FAILED

        handler = self._handlers[source.rule]
        try:
            return await handler(source, raw, handle)
        except SourceParseError as e:
            logger.error(
                "Unable to parse source",
                source=source.name,
                path=source.path,
                raw=raw,
                error=str(e)
            )
            return SourceOutcome.PARSE_FAILED

    async def _report_histogram(self, source: StatSource, raw: str, handle: StatsHandle) -> SourceOutcome:
        buckets = parse_histogram(raw, source.path)
        await handle.report_charge_cycles(buckets)
        return SourceOutcome.REPORTED

    async def _report_failure_flag(self, source: StatSource, raw: str, handle: StatsHandle) -> SourceOutcome:
        if not parse_failure_flag(raw, source.path):
            return SourceOutcome.NOTHING_TO_REPORT

        logger.warning("Hardware failure flagged", source=source.name, state=raw.strip())
        await handle.report_hardware_failed(
            source.hardware_type,
            source.hardware_location,
            source.error_code
        )
        return SourceOutcome.REPORTED

    async def _report_counter(self, source: StatSource, raw: str, handle: StatsHandle) -> SourceOutcome:
        count = parse_counter(raw, source.path)

        outcome = SourceOutcome.NOTHING_TO_REPORT
        if count > 0:
            await handle.report_slow_io(source.operation, count)
            outcome = SourceOutcome.REPORTED

        # Reset even when nothing was reported, so the node always starts at 0
        if source.clear_after_read:
            clear_source(source.path)
        return outcome

    async def _report_channel_pair(self, source: StatSource, raw: str, handle: StatsHandle) -> SourceOutcome:
        left, right = parse_channel_pair(raw, source.path)
        await handle.report_speaker_impedance(0, scale_value(left, source.scale))
        await handle.report_speaker_impedance(1, scale_value(right, source.scale))
        return SourceOutcome.REPORTED
