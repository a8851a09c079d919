"""
Match and log reports.

Builds per-match statistics from the matches collected by the parser:
players, kill score per player and a kill count per means of death.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

from .game import Match, MeansOfDeath, PlayerName

__all__ = ['ReportError', 'MatchReport', 'LogReport', 'KILL_COUNT_MAX']

logger = logging.getLogger(__name__)

# Largest count a report field can hold (signed 64 bit)
KILL_COUNT_MAX = 2 ** 63 - 1


class ReportError(ValueError):
    """A match could not be turned into a consistent report."""


@dataclass
class MatchReport:
    """
    Statistics of a single match.

    Attributes:
        total_kills: Number of kills in the match, world kills included.
        players: Last names used by the players, in first-seen order.
        kills: Player score: +1 per kill, -1 per death caused by the world.
        kills_by_means: Kill count for every canonical means of death.
    """
    total_kills: int = 0
    players: List[PlayerName] = field(default_factory=list)
    kills: Dict[PlayerName, int] = field(default_factory=dict)
    kills_by_means: Dict[MeansOfDeath, int] = field(default_factory=dict)

    @classmethod
    def generate(cls, match: Match) -> 'MatchReport':
        """
        Generate the report of a match.

        Args:
            match: A completed match.

        Returns:
            The match report.

        Raises:
            ReportError: If a kill carries a means of death outside the
                canonical set.
        """
        total_kills = min(len(match.kills), KILL_COUNT_MAX)

        players = list(dict.fromkeys(match.players.values()))
        kills = {name: 0 for name in players}
        kills_by_means = {means: 0 for means in MeansOfDeath}

        for kill in match.kills:
            if kill.killer.is_world:
                # The world's victim loses a point
                cls._adjust(kills, match, kill.target, -1, 'kill target')
            else:
                cls._adjust(kills, match, kill.killer.player_id, 1, 'killer')

            if kill.means not in kills_by_means:
                raise ReportError(f"Unknown means of death: {kill.means!r}")
            kills_by_means[kill.means] += 1

        return cls(
            total_kills=total_kills,
            players=players,
            kills=kills,
            kills_by_means=kills_by_means,
        )

    @staticmethod
    def _adjust(kills: Dict[PlayerName, int], match: Match, player_id: int,
                delta: int, role: str) -> None:
        name = match.players.get(player_id)
        if name is None:
            logger.warning(f"Bad game report: player {player_id} ({role}) was not found")
            return
        kills[name] += delta

    def to_dict(self) -> Dict[str, Any]:
        """Plain representation for serialization."""
        return {
            'total_kills': self.total_kills,
            'players': list(self.players),
            'kills': dict(self.kills),
            'kills_by_means': {means.name: count for means, count in self.kills_by_means.items()},
        }


@dataclass
class LogReport:
    """
    Report of a full log file.

    Attributes:
        matches: Match reports keyed by ``game_<n>`` in the order the
            matches closed.
    """
    matches: Dict[str, MatchReport] = field(default_factory=dict)

    @classmethod
    def generate(cls, matches: Iterable[Match]) -> 'LogReport':
        """
        Generate the report of a whole log.

        Any error raised while reading matches or building a match report
        aborts the whole report.

        Args:
            matches: Completed matches in the order they closed.

        Returns:
            The log report.
        """
        report = cls()
        for number, match in enumerate(matches, start=1):
            match_id = f"game_{number}"
            report.matches[match_id] = MatchReport.generate(match)
            logger.debug(f"Built report for {match_id}")

        logger.info(f"Built reports for {len(report.matches)} matches")
        return report

    def to_dict(self) -> Dict[str, Any]:
        """Plain representation for serialization."""
        return {match_id: match.to_dict() for match_id, match in self.matches.items()}
