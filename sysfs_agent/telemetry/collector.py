"""
Sysfs Agent - Stats Collector

Runs one collection cycle: connect to the stats service, read every source
in table order, release the connection. If the service is not running the
whole cycle is skipped and no source is touched.
"""

import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import structlog

from ..sink.base import TelemetrySink
from ..sources.base import SourceOutcome, StatSource
from ..sources.reader import SourceReader

logger = structlog.get_logger(__name__)


@dataclass
class CycleResult:
    """Summary of one collection cycle."""
    sink_available: bool
    outcomes: Dict[str, SourceOutcome] = field(default_factory=dict)
    duration: float = 0.0

    @property
    def reported(self) -> int:
        return sum(1 for o in self.outcomes.values() if o == SourceOutcome.REPORTED)

    @property
    def failed(self) -> List[str]:
        return [
            name for name, o in self.outcomes.items()
            if o in (SourceOutcome.READ_FAILED, SourceOutcome.PARSE_FAILED)
        ]

    def to_dict(self) -> dict:
        return {
            "sink_available": self.sink_available,
            "outcomes": {name: o.value for name, o in self.outcomes.items()},
            "reported": self.reported,
            "failed": self.failed,
            "duration": round(self.duration, 3),
        }


class StatsCollector:
    """Dispatches each cycle's reads and reports."""

    def __init__(
        self,
        sink: TelemetrySink,
        sources: List[StatSource],
        reader: Optional[SourceReader] = None
    ):
        self.sink = sink
        self.sources = list(sources)
        self.reader = reader or SourceReader()
        self.cycles = 0

    async def collect_once(self) -> CycleResult:
        """Run one full cycle."""
        start_time = time.monotonic()
        self.cycles += 1

        handle = await self.sink.acquire()
        if handle is None:
            logger.error("Unable to connect to stats service, skipping cycle", cycle=self.cycles)
            return CycleResult(sink_available=False, duration=time.monotonic() - start_time)

        result = CycleResult(sink_available=True)
        try:
            for source in self.sources:
                try:
                    outcome = await self.reader.read(source, handle)
                except Exception as e:
                    logger.exception("Source collection error", source=source.name, error=str(e))
                    outcome = SourceOutcome.READ_FAILED
                result.outcomes[source.name] = outcome
        finally:
            await self.sink.release(handle)

        result.duration = time.monotonic() - start_time
        logger.info("Collection cycle complete", cycle=self.cycles, **result.to_dict())
        return result
