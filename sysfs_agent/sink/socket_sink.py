"""
Sysfs Agent - Unix Socket Sink

Talks to the telemetry service over a Unix domain socket using length-prefixed
JSON-RPC 2.0. Reports are sent as notifications (no id), so the service never
replies and nothing is read back.
"""

import asyncio
import json
import os
from typing import Any, Dict, Optional

import structlog

from ..errors import SinkUnavailableError
from .base import (
    HardwareErrorCode,
    HardwareType,
    IoOperation,
    StatsHandle,
    TelemetrySink,
)

logger = structlog.get_logger(__name__)


def encode_notification(method: str, params: Dict[str, Any]) -> bytes:
    """Encode a JSON-RPC notification with its 4-byte big-endian length prefix."""
    message = {
        "jsonrpc": "2.0",
        "method": method,
        "params": params,
    }
    body = json.dumps(message).encode("utf-8")
    return len(body).to_bytes(4, byteorder="big") + body


class SocketStatsHandle(StatsHandle):
    """One connection to the telemetry service."""

    def __init__(self, writer: asyncio.StreamWriter):
        self._writer = writer
        self._broken = False
        self._closed = False
        self.sent = 0

    @property
    def is_open(self) -> bool:
        return not (self._closed or self._broken)

    async def _notify(self, method: str, params: Dict[str, Any]) -> None:
        if not self.is_open:
            logger.warning("Report dropped, sink connection is down", method=method)
            return

        try:
            self._writer.write(encode_notification(method, params))
            await self._writer.drain()
        except (ConnectionError, OSError) as e:
            self._broken = True
            logger.error("Report failed", method=method, error=str(e))
            return

        self.sent += 1
        logger.debug("Report sent", method=method, params=params)

    async def report_charge_cycles(self, buckets: str) -> None:
        await self._notify("stats.charge_cycles", {"buckets": buckets})

    async def report_hardware_failed(
        self,
        hardware_type: HardwareType,
        hardware_location: int,
        error_code: HardwareErrorCode
    ) -> None:
        await self._notify("stats.hardware_failed", {
            "hardware_type": int(hardware_type),
            "hardware_location": hardware_location,
            "error_code": int(error_code),
        })

    async def report_slow_io(self, operation: IoOperation, count: int) -> None:
        await self._notify("stats.slow_io", {
            "operation": int(operation),
            "count": count,
        })

    async def report_speaker_impedance(self, speaker_location: int, milliohms: int) -> None:
        await self._notify("stats.speaker_impedance", {
            "speaker_location": speaker_location,
            "milliohms": milliohms,
        })

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._writer.close()
            await self._writer.wait_closed()
        except (ConnectionError, OSError) as e:
            logger.debug("Error closing sink connection", error=str(e))


class SocketSink(TelemetrySink):
    """Connects to the telemetry service once per cycle."""

    def __init__(self, socket_path: str, connect_timeout: float = 1.0):
        self.socket_path = socket_path
        self.connect_timeout = connect_timeout

    async def _connect(self) -> SocketStatsHandle:
        if not os.path.exists(self.socket_path):
            raise SinkUnavailableError(f"Sink socket not found: {self.socket_path}")

        try:
            _, writer = await asyncio.wait_for(
                asyncio.open_unix_connection(self.socket_path),
                timeout=self.connect_timeout
            )
        except asyncio.TimeoutError as e:
            raise SinkUnavailableError("Sink connection timeout") from e
        except (ConnectionError, OSError) as e:
            raise SinkUnavailableError(f"Sink connection failed: {e}") from e

        return SocketStatsHandle(writer)

    async def acquire(self) -> Optional[StatsHandle]:
        try:
            handle = await self._connect()
        except SinkUnavailableError as e:
            logger.debug("Unable to connect to stats service", socket=self.socket_path, error=str(e))
            return None

        logger.debug("Connected to stats service", socket=self.socket_path)
        return handle

    async def release(self, handle: StatsHandle) -> None:
        if isinstance(handle, SocketStatsHandle):
            await handle.close()
            logger.debug("Released stats service connection", reports=handle.sent)
