"""
Sysfs Agent - Sources Package

Stat sources are sysfs nodes exposing hardware counters:
- charge_cycles: battery charge-cycle histogram
- codec_state: audio codec failure flag
- slowio_*: storage slow-I/O counters (cleared after each read)
- speaker_impedance: left/right speaker impedance
"""

from .base import ParseRule, SourceOutcome, StatSource
from .reader import SourceReader
from .table import build_source_table

__all__ = [
    "ParseRule",
    "SourceOutcome",
    "StatSource",
    "SourceReader",
    "build_source_table",
]
