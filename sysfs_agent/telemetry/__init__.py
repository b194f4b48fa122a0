"""
Sysfs Agent - Telemetry Package

Collects hardware stats and forwards them to the stats service.
"""

from .collector import CycleResult, StatsCollector

__all__ = ["CycleResult", "StatsCollector"]
