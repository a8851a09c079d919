"""
Quake Log Parsing

This package turns Quake III: Arena server log lines into events and
collects those events into completed matches.
"""

__all__ = ['events', 'parser']

from .events import RawEvent
from .parser import LogWalker, MatchTracker
