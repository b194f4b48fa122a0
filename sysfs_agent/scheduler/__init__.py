"""
Sysfs Agent - Scheduler Package

Boot-clock based periodic trigger for the collection loop.
"""

from .trigger import PeriodicTrigger, boottime

__all__ = ["PeriodicTrigger", "boottime"]
