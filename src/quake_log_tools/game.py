"""
Game data model shared by the log parser and the report builders.

A match is collected from the log as a mapping of player ids to the last
name they used plus the ordered list of kills that happened while it was
open.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

# Player IDs are connection slots, stable only within one match
PlayerId = int
PlayerName = str

# Entity number the server uses for the world (ENTITYNUM_WORLD)
WORLD_PLAYER_ID = 1022


class MeansOfDeath(Enum):
    """
    Canonical means of death (MOD), in the server's own order.

    The values are the numeric codes written in the third field of ``Kill``
    records.
    """
    MOD_UNKNOWN = 0
    MOD_SHOTGUN = 1
    MOD_GAUNTLET = 2
    MOD_MACHINEGUN = 3
    MOD_GRENADE = 4
    MOD_GRENADE_SPLASH = 5
    MOD_ROCKET = 6
    MOD_ROCKET_SPLASH = 7
    MOD_PLASMA = 8
    MOD_PLASMA_SPLASH = 9
    MOD_RAILGUN = 10
    MOD_LIGHTNING = 11
    MOD_BFG = 12
    MOD_BFG_SPLASH = 13
    MOD_WATER = 14
    MOD_SLIME = 15
    MOD_LAVA = 16
    MOD_CRUSH = 17
    MOD_TELEFRAG = 18
    MOD_FALLING = 19
    MOD_SUICIDE = 20
    MOD_TARGET_LASER = 21
    MOD_TRIGGER_HURT = 22
    MOD_NAIL = 23
    MOD_CHAINGUN = 24
    MOD_PROXIMITY_MINE = 25
    MOD_KAMIKAZE = 26
    MOD_JUICED = 27
    MOD_GRAPPLE = 28

    @classmethod
    def from_name(cls, name: str) -> Optional['MeansOfDeath']:
        """Look up a cause by its log name, e.g. ``MOD_ROCKET``."""
        return cls.__members__.get(name.strip())

    @classmethod
    def from_code(cls, code: int) -> Optional['MeansOfDeath']:
        """Look up a cause by its numeric code."""
        try:
            return cls(code)
        except ValueError:
            return None


@dataclass(frozen=True)
class Killer:
    """The agent of a kill: the world, or a player identified by id."""
    player_id: Optional[PlayerId] = None

    @classmethod
    def world(cls) -> 'Killer':
        return cls(None)

    @classmethod
    def player(cls, player_id: PlayerId) -> 'Killer':
        return cls(player_id)

    @property
    def is_world(self) -> bool:
        return self.player_id is None

    def __repr__(self) -> str:
        if self.is_world:
            return "Killer.world()"
        return f"Killer.player({self.player_id})"


@dataclass(frozen=True)
class Kill:
    """A single ``Kill`` record as read from the log."""
    killer: Killer
    target: PlayerId
    means: MeansOfDeath


@dataclass
class Match:
    """
    A full match as read from the log.

    Attributes:
        players: Player ids mapped to the last name they used. Insertion
            order is the order ids were first seen.
        kills: Kills in the order they happened.
    """
    players: Dict[PlayerId, PlayerName] = field(default_factory=dict)
    kills: List[Kill] = field(default_factory=list)
