#!/usr/bin/env python3
"""
Sysfs Agent

Long-running daemon that samples hardware counters exposed in sysfs and
forwards them to the stats service:
- Battery charge-cycle histogram
- Audio codec failure flag
- Storage slow-I/O counters (read, write, unmap, sync)
- Speaker impedance (left and right)

Stats are collected once 30 seconds after start and then every 24 hours.

Usage:
    sysfs-agent [--config CONFIG_PATH]
"""

import argparse
import asyncio
import logging
import signal
import sys
from typing import List, Optional

import structlog

from .config import DEFAULT_CONFIG_PATH, Settings, load_settings
from .errors import ConfigError, TimerError
from .scheduler import PeriodicTrigger
from .sink import SocketSink, TelemetrySink
from .sources import build_source_table
from .telemetry import StatsCollector

logger = structlog.get_logger(__name__)


def configure_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging on top of stdlib logging."""
    logging.basicConfig(format="%(message)s", stream=sys.stdout)
    set_log_level(level)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def set_log_level(level: str) -> None:
    """Apply the configured level to the root logger."""
    logging.getLogger().setLevel(level)


class StatsAgent:
    """Main agent application."""

    def __init__(
        self,
        settings: Settings,
        sink: Optional[TelemetrySink] = None,
        trigger: Optional[PeriodicTrigger] = None
    ):
        self.settings = settings
        self.running = False
        self._loop_task: Optional[asyncio.Task] = None
        self._stop_task: Optional[asyncio.Task] = None

        self.sources = build_source_table(settings.sources)
        self.sink = sink or SocketSink(
            socket_path=settings.sink.socket_path,
            connect_timeout=settings.sink.connect_timeout
        )
        self.collector = StatsCollector(self.sink, self.sources)
        schedule = settings.schedule
        self.trigger = trigger or PeriodicTrigger(
            warmup_delay=schedule.warmup_delay,
            period=schedule.period,
            max_sleep=schedule.max_sleep
        )

    async def _collection_loop(self) -> None:
        """Wait for each tick and run one cycle."""
        while self.running:
            await self.trigger.wait()
            await self.collector.collect_once()

    async def start(self, install_signals: bool = True) -> None:
        """Start the agent and run until stopped.

        Raises TimerError if the periodic trigger cannot be armed.
        """
        logger.info(
            "Starting Sysfs Agent",
            version=self.settings.agent.version,
            sources=len(self.sources)
        )
        for source in self.sources:
            logger.debug("Source configured", **source.to_dict())

        self.trigger.arm()
        self.running = True

        if install_signals:
            loop = asyncio.get_running_loop()
            for signum in (signal.SIGTERM, signal.SIGINT):
                loop.add_signal_handler(signum, self.handle_signal, signum)

        self._loop_task = asyncio.create_task(self._collection_loop())
        try:
            await self._loop_task
        except asyncio.CancelledError:
            if self.running:
                raise
        finally:
            if install_signals:
                loop = asyncio.get_running_loop()
                for signum in (signal.SIGTERM, signal.SIGINT):
                    loop.remove_signal_handler(signum)

        logger.info("Sysfs Agent stopped", cycles=self.collector.cycles)

    async def stop(self) -> None:
        """Stop the agent."""
        logger.info("Stopping Sysfs Agent")
        self.running = False
        if self._loop_task and not self._loop_task.done():
            self._loop_task.cancel()

    def handle_signal(self, signum: int) -> None:
        """Handle shutdown signals."""
        logger.info("Received signal", signal=signum)
        self._stop_task = asyncio.create_task(self.stop())


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit status."""
    parser = argparse.ArgumentParser(description="Sysfs hardware stats agent")
    parser.add_argument(
        "--config", "-c",
        default=DEFAULT_CONFIG_PATH,
        help="Path to configuration file"
    )
    args = parser.parse_args(argv)

    configure_logging()
    try:
        settings = load_settings(args.config)
    except ConfigError as e:
        logger.error("Invalid configuration", error=str(e))
        return 1

    set_log_level(settings.logging.level)
    agent = StatsAgent(settings)

    try:
        asyncio.run(agent.start())
    except TimerError as e:
        logger.error("Unable to run periodic timer", error=str(e))
        return 1
    return 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
