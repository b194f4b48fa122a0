"""
Sysfs Agent

Samples hardware counters from sysfs and forwards them to the stats service.
"""

__version__ = "1.0.0"
