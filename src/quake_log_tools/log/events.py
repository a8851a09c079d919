"""
Log Events

Splits raw log lines into key/payload pairs and decodes the few record kinds
that matter for match statistics. Everything else a server writes (items,
connects, chat, scores) is ignored.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Union

from ..game import Killer, MeansOfDeath, PlayerId, PlayerName, WORLD_PLAYER_ID

__all__ = [
    'RawEvent', 'Event', 'InitGame', 'ShutdownGame', 'PlayerNameChanged',
    'PlayerKilled', 'parse_unsigned',
]

logger = logging.getLogger(__name__)

UNSIGNED_PATTERN = re.compile(r'[0-9]+')
# "... killed Zeh by MOD_ROCKET" -> "MOD_ROCKET"
MEANS_NAME_PATTERN = re.compile(r'\sby\s+(MOD_\w+)\b')
WORLD_MARKER = '<world>'
NAME_MARKER = 'n\\'


@dataclass(frozen=True)
class InitGame:
    """A match starts."""


@dataclass(frozen=True)
class ShutdownGame:
    """A match ends."""


@dataclass(frozen=True)
class PlayerNameChanged:
    """The player with the given id now uses the given name."""
    player_id: PlayerId
    name: PlayerName


@dataclass(frozen=True)
class PlayerKilled:
    """Someone (target) was killed by the killer with the given means."""
    killer: Killer
    target: PlayerId
    means: MeansOfDeath


Event = Union[InitGame, ShutdownGame, PlayerNameChanged, PlayerKilled]


def parse_unsigned(token: str) -> Optional[int]:
    """Parse a non-negative decimal integer, or return None."""
    token = token.strip()
    if not UNSIGNED_PATTERN.fullmatch(token):
        return None
    return int(token)


@dataclass(frozen=True)
class RawEvent:
    """
    Raw key/payload split of a log line.

    Attributes:
        key: Record kind, such as ``InitGame``.
        payload: Everything after the first colon, stripped.
    """
    key: str
    payload: str

    @classmethod
    def from_line(cls, line: str) -> Optional['RawEvent']:
        """
        Split a log line into key and payload.

        The leading timestamp is skipped by starting at the first alphabetic
        character. Separator lines and lines without a colon are not events.

        Args:
            line: One raw line, trailing newline allowed.

        Returns:
            The raw event, or None if the line carries no event.
        """
        start = next((i for i, char in enumerate(line) if char.isalpha()), None)
        if start is None:
            return None

        key, sep, payload = line[start:].partition(':')
        if not sep:
            return None

        return cls(key=key.strip(), payload=payload.strip())

    def parse(self) -> Optional[Event]:
        """
        Decode the raw event into a structured event.

        Unused record kinds and records whose payload does not decode both
        return None; the caller skips the line either way.

        Returns:
            The decoded event, or None.
        """
        if self.key == 'InitGame':
            return InitGame()

        if self.key == 'ShutdownGame':
            return ShutdownGame()

        if self.key == 'ClientUserinfoChanged':
            event = self._parse_name_change()
        elif self.key == 'Kill':
            event = self._parse_kill()
        else:
            return None

        if event is None:
            logger.debug(f"Ignoring malformed {self.key} record: {self.payload!r}")
        return event

    def _parse_name_change(self) -> Optional[PlayerNameChanged]:
        # 2 n\Isgalamido\t\0\model\xian/default\...
        id_str, _, userinfo = self.payload.partition(' ')
        player_id = parse_unsigned(id_str)
        if player_id is None:
            return None

        _, marker, name_trailing = userinfo.partition(NAME_MARKER)
        if not marker:
            return None

        name, _, _ = name_trailing.partition('\\')
        return PlayerNameChanged(player_id=player_id, name=name)

    def _parse_kill(self) -> Optional[PlayerKilled]:
        # 1022 3 22: <world> killed Isgalamido by MOD_TRIGGER_HURT
        killer_str, _, tail = self.payload.partition(' ')
        target_str, _, tail = tail.strip().partition(' ')
        code_str, sep, text = tail.strip().partition(':')
        if not sep:
            return None

        killer = self._resolve_killer(killer_str, text)
        target = parse_unsigned(target_str)
        means = self._resolve_means(code_str, text)
        if killer is None or target is None or means is None:
            return None

        return PlayerKilled(killer=killer, target=target, means=means)

    @staticmethod
    def _resolve_killer(killer_str: str, text: str) -> Optional[Killer]:
        if text.strip().startswith(WORLD_MARKER):
            return Killer.world()

        killer_id = parse_unsigned(killer_str)
        if killer_id is None:
            return None
        if killer_id == WORLD_PLAYER_ID:
            return Killer.world()
        return Killer.player(killer_id)

    @staticmethod
    def _resolve_means(code_str: str, text: str) -> Optional[MeansOfDeath]:
        # The last "by MOD_..." marker is authoritative; other records fall back to the code
        names = MEANS_NAME_PATTERN.findall(text)
        if names:
            return MeansOfDeath.from_name(names[-1])

        code = parse_unsigned(code_str)
        if code is None:
            return None
        return MeansOfDeath.from_code(code)
