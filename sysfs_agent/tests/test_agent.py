"""
Sysfs Agent - Agent Tests

Pytest tests for the agent process loop and entry point.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from sysfs_agent.agent import StatsAgent, main
from sysfs_agent.config import Settings
from sysfs_agent.errors import ConfigError, TimerError
from sysfs_agent.sink import SocketSink


def make_agent(cycles_before_stop: int):
    """Build an agent whose trigger stops it after a number of ticks."""
    sink = MagicMock()
    sink.acquire = AsyncMock(return_value=None)
    trigger = MagicMock()
    agent = StatsAgent(Settings(), sink=sink, trigger=trigger)

    ticks = 0

    async def wait():
        nonlocal ticks
        ticks += 1
        if ticks > cycles_before_stop:
            await agent.stop()
            await asyncio.sleep(0)
        return 0

    trigger.wait = AsyncMock(side_effect=wait)
    return agent, sink, trigger


class TestStatsAgent:
    """Test the collection loop."""

    def test_components(self):
        """Test default wiring from settings."""
        agent = StatsAgent(Settings())

        assert isinstance(agent.sink, SocketSink)
        assert agent.sink.socket_path == Settings().sink.socket_path
        assert agent.trigger.warmup_delay == 30.0
        assert agent.trigger.period == 86400
        assert len(agent.sources) == 7

    @pytest.mark.asyncio
    async def test_cycle_per_tick(self):
        """Test one cycle runs per trigger tick until stopped."""
        agent, sink, trigger = make_agent(cycles_before_stop=3)

        await agent.start(install_signals=False)

        trigger.arm.assert_called_once()
        assert sink.acquire.await_count == 3
        assert agent.collector.cycles == 3
        assert agent.running is False

    @pytest.mark.asyncio
    async def test_arm_failure(self):
        """Test a timer that cannot be armed stops startup."""
        agent, sink, trigger = make_agent(cycles_before_stop=1)
        trigger.arm.side_effect = TimerError("no clock")

        with pytest.raises(TimerError):
            await agent.start(install_signals=False)

        sink.acquire.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_wait_failure(self):
        """Test a timer failure while running propagates."""
        agent, sink, trigger = make_agent(cycles_before_stop=1)
        trigger.wait = AsyncMock(side_effect=TimerError("clock gone"))

        with pytest.raises(TimerError):
            await agent.start(install_signals=False)


class TestMain:
    """Test the entry point."""

    def test_timer_error_exit_status(self, tmp_path):
        """Test a fatal timer error exits non-zero."""
        with patch("sysfs_agent.agent.configure_logging"), \
                patch.object(StatsAgent, "start", AsyncMock(side_effect=TimerError("no clock"))):
            assert main(["--config", str(tmp_path / "absent.yaml")]) == 1

    def test_clean_exit_status(self, tmp_path):
        """Test a normal shutdown exits zero."""
        with patch("sysfs_agent.agent.configure_logging"), \
                patch.object(StatsAgent, "start", AsyncMock(return_value=None)):
            assert main(["--config", str(tmp_path / "absent.yaml")]) == 0

    def test_invalid_config_exit_status(self, tmp_path):
        """Test an invalid config file exits non-zero."""
        config = tmp_path / "config.yaml"
        config.write_text("schedule:\n  period: -5\n")

        with patch("sysfs_agent.agent.configure_logging"):
            assert main(["--config", str(config)]) == 1

    def test_logging_ready_before_config(self, tmp_path):
        """Test config errors are logged through the configured JSON logger."""
        with patch("sysfs_agent.agent.configure_logging") as configure:
            def load(path):
                configure.assert_called_once_with()
                raise ConfigError("bad config")

            with patch("sysfs_agent.agent.load_settings", side_effect=load) as load_settings:
                assert main(["--config", str(tmp_path / "config.yaml")]) == 1

        load_settings.assert_called_once()

    def test_configured_level_applied(self, tmp_path):
        """Test the level from the config file replaces the startup default."""
        config = tmp_path / "config.yaml"
        config.write_text("logging:\n  level: debug\n")

        with patch("sysfs_agent.agent.configure_logging"), \
                patch("sysfs_agent.agent.set_log_level") as set_level, \
                patch.object(StatsAgent, "start", AsyncMock(return_value=None)):
            assert main(["--config", str(config)]) == 0

        set_level.assert_called_once_with("DEBUG")
