"""
Quake III: Arena Log Parser

Turns a server log into a sequence of completed matches. The parser works
as an iterator: it reads the log line by line and yields a match whenever
one is finished, so only the currently open match is ever held in memory.
"""

import gzip
import logging
from dataclasses import dataclass, field
from typing import IO, Iterator, Optional, Union

from ..game import Kill, Match
from .events import (
    Event, InitGame, PlayerKilled, PlayerNameChanged, RawEvent, ShutdownGame,
)

__all__ = ['Idle', 'Open', 'MatchTracker', 'LogWalker']

logger = logging.getLogger(__name__)


@dataclass
class Idle:
    """No match is currently open."""


@dataclass
class Open:
    """A match is open and will eventually be emitted."""
    match: Match = field(default_factory=Match)


State = Union[Idle, Open]


class MatchTracker:
    """
    State machine that collects events into matches.

    ``InitGame`` opens a match (closing any match still open),
    ``ShutdownGame`` closes it. Name changes and kills only count while a
    match is open.
    """

    def __init__(self) -> None:
        self.state: State = Idle()

    def process_line(self, line: str) -> Optional[Match]:
        """
        Feed one raw log line to the tracker.

        Args:
            line: A raw log line.

        Returns:
            The match closed by this line, if any.
        """
        raw_event = RawEvent.from_line(line)
        if raw_event is None:
            return None

        event = raw_event.parse()
        if event is None:
            return None

        return self.feed(event)

    def feed(self, event: Event) -> Optional[Match]:
        """
        Apply one decoded event.

        Args:
            event: The decoded event.

        Returns:
            The match closed by this event, if any.
        """
        if isinstance(event, InitGame):
            finished = self.finish()
            self.state = Open()
            return finished

        if isinstance(event, ShutdownGame):
            return self.finish()

        if isinstance(event, PlayerNameChanged):
            if isinstance(self.state, Open):
                self.state.match.players[event.player_id] = event.name
            return None

        if isinstance(event, PlayerKilled):
            if isinstance(self.state, Open):
                self.state.match.kills.append(
                    Kill(killer=event.killer, target=event.target, means=event.means)
                )
            return None

        raise TypeError(f"Unexpected event: {event!r}")

    def finish(self) -> Optional[Match]:
        """
        Close the open match, if any, and go back to idle.

        Returns:
            The match that was open, or None when idle.
        """
        state, self.state = self.state, Idle()
        if isinstance(state, Open):
            return state.match
        return None


class LogWalker:
    """
    Iterator over the matches of a log stream.

    The stream may be binary (lines are decoded with ``encoding`` and
    ``errors``) or text. An ``EOFError`` from the stream, as raised by
    truncated compressed data, ends the log like a normal end of file. Other
    I/O errors propagate to the caller.

    The walker is single-pass: once exhausted it stays exhausted.
    """

    def __init__(self, stream: IO, encoding: str = 'utf-8', errors: str = 'replace') -> None:
        self.stream = stream
        self.encoding = encoding
        self.errors = errors
        self.tracker = MatchTracker()
        self.line_count = 0
        self._exhausted = False

    @classmethod
    def from_path(cls, path: str, encoding: str = 'utf-8', errors: str = 'replace') -> 'LogWalker':
        """
        Open a log file, gzip-compressed when it ends in ``.gz``.

        The caller owns the returned walker's stream and should close it.
        """
        if str(path).lower().endswith('.gz'):
            stream = gzip.open(path, 'rb')
        else:
            stream = open(path, 'rb')
        logger.info(f"Reading log file: {path}")
        return cls(stream, encoding=encoding, errors=errors)

    def close(self) -> None:
        self.stream.close()

    def __enter__(self) -> 'LogWalker':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def __iter__(self) -> Iterator[Match]:
        return self

    def __next__(self) -> Match:
        if self._exhausted:
            raise StopIteration

        while True:
            line = self._read_line()
            if line is None:
                self._exhausted = True
                match = self.tracker.finish()
                logger.info(f"Reached end of log after {self.line_count} lines")
                if match is None:
                    raise StopIteration
                return match

            match = self.tracker.process_line(line)
            if match is not None:
                return match

    def _read_line(self) -> Optional[str]:
        """Read the next line, or None at end of input."""
        try:
            line = self.stream.readline()
        except EOFError as e:
            logger.warning(f"Log ended unexpectedly after {self.line_count} lines: {e}")
            return None

        if not line:
            return None

        self.line_count += 1
        if isinstance(line, bytes):
            return line.decode(self.encoding, errors=self.errors)
        return line
