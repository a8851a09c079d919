#!/usr/bin/env python3
"""
Tests for match and log report generation.
"""

import io
import logging
import os
import sys

import pytest

# Add the src directory to the path so we can import the modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from quake_log_tools.game import Kill, Killer, Match, MeansOfDeath
from quake_log_tools.log.parser import LogWalker
from quake_log_tools.report import LogReport, MatchReport, ReportError


def match_1():
    return Match(players={2: "Isgalamido"}, kills=[])


def match_2():
    return Match(
        players={2: "Dono da Bola", 3: "Isgalamido", 4: "Zeh"},
        kills=[
            Kill(Killer.world(), 3, MeansOfDeath.MOD_TRIGGER_HURT),
            Kill(Killer.world(), 2, MeansOfDeath.MOD_FALLING),
            Kill(Killer.world(), 3, MeansOfDeath.MOD_FALLING),
            Kill(Killer.player(2), 4, MeansOfDeath.MOD_ROCKET),
        ],
    )


def means_counts(**counts):
    return {means: counts.get(means.name, 0) for means in MeansOfDeath}


def test_match_report_without_kills():
    expected = MatchReport(
        total_kills=0,
        players=["Isgalamido"],
        kills={"Isgalamido": 0},
        kills_by_means=means_counts(),
    )
    assert MatchReport.generate(match_1()) == expected


def test_match_report_world_kills_penalize_target():
    expected = MatchReport(
        total_kills=4,
        players=["Dono da Bola", "Isgalamido", "Zeh"],
        kills={"Dono da Bola": 0, "Isgalamido": -2, "Zeh": 0},
        kills_by_means=means_counts(MOD_TRIGGER_HURT=1, MOD_FALLING=2, MOD_ROCKET=1),
    )
    assert MatchReport.generate(match_2()) == expected


def test_match_report_invariants():
    report = MatchReport.generate(match_2())
    assert report.total_kills == len(match_2().kills)
    assert sum(report.kills_by_means.values()) == report.total_kills
    assert list(report.kills_by_means) == list(MeansOfDeath)
    assert all(count >= 0 for count in report.kills_by_means.values())


def test_match_report_is_deterministic():
    match = match_2()
    assert MatchReport.generate(match) == MatchReport.generate(match)
    assert match == match_2()


def test_match_report_skips_dangling_players(caplog):
    match = Match(
        players={1: "Zeh"},
        kills=[
            Kill(Killer.player(7), 1, MeansOfDeath.MOD_SHOTGUN),
            Kill(Killer.world(), 9, MeansOfDeath.MOD_LAVA),
            Kill(Killer.player(1), 7, MeansOfDeath.MOD_RAILGUN),
        ],
    )
    with caplog.at_level(logging.WARNING):
        report = MatchReport.generate(match)

    assert report.kills == {"Zeh": 1}
    assert report.total_kills == 3
    assert sum(report.kills_by_means.values()) == 3
    assert "player 7 (killer) was not found" in caplog.text
    assert "player 9 (kill target) was not found" in caplog.text


def test_match_report_shared_names():
    match = Match(
        players={1: "Zeh", 2: "Zeh"},
        kills=[Kill(Killer.player(1), 2, MeansOfDeath.MOD_GAUNTLET)],
    )
    report = MatchReport.generate(match)
    assert report.players == ["Zeh"]
    assert report.kills == {"Zeh": 1}


def test_match_report_rejects_foreign_means():
    match = Match(players={1: "Zeh"}, kills=[Kill(Killer.player(1), 1, "MOD_SPOON")])
    with pytest.raises(ReportError):
        MatchReport.generate(match)


def test_match_report_to_dict():
    data = MatchReport.generate(match_2()).to_dict()
    assert data["total_kills"] == 4
    assert data["players"] == ["Dono da Bola", "Isgalamido", "Zeh"]
    assert data["kills"] == {"Dono da Bola": 0, "Isgalamido": -2, "Zeh": 0}
    assert list(data["kills_by_means"])[:3] == ["MOD_UNKNOWN", "MOD_SHOTGUN", "MOD_GAUNTLET"]
    assert data["kills_by_means"]["MOD_FALLING"] == 2
    assert len(data["kills_by_means"]) == 29


def test_log_report_labels_in_order():
    report = LogReport.generate([match_1(), match_2(), Match()])
    assert list(report.matches) == ["game_1", "game_2", "game_3"]
    assert report.matches["game_2"] == MatchReport.generate(match_2())
    assert report.matches["game_3"].total_kills == 0


def test_log_report_empty():
    assert LogReport.generate([]).to_dict() == {}


def test_log_report_aborts_on_bad_match():
    bad = Match(players={1: "Zeh"}, kills=[Kill(Killer.player(1), 1, None)])
    with pytest.raises(ReportError):
        LogReport.generate([match_1(), bad, match_2()])


def test_log_report_propagates_source_errors():
    def matches():
        yield match_1()
        raise OSError("disk gone")

    with pytest.raises(OSError):
        LogReport.generate(matches())


def test_log_report_from_log():
    log = "\n".join([
        "  0:00 InitGame: \\sv_hostname\\Code Miner Server",
        "  0:01 ClientUserinfoChanged: 2 n\\Mal\\t\\0",
        "  0:02 Kill: 1022 2 22: <world> killed Mal by MOD_TRIGGER_HURT",
        "  0:03 Kill: 2 4 7:",
        "  0:04 Kill: 1 2 6: Ghost killed Mal by MOD_SPOON",
        "  1:00 ShutdownGame:",
        "  1:01 Kill: 2 2 20: Mal killed Mal by MOD_SUICIDE",
        "  2:00 InitGame: \\sv_hostname\\Code Miner Server",
        "  2:01 ClientUserinfoChanged: 3 n\\Zeh\\t\\0",
        "  3:00 InitGame: \\sv_hostname\\Code Miner Server",
        "",
    ])
    report = LogReport.generate(LogWalker(io.StringIO(log))).to_dict()

    assert list(report) == ["game_1", "game_2", "game_3"]
    assert report["game_1"]["total_kills"] == 2
    assert report["game_1"]["kills"] == {"Mal": 0}
    assert report["game_1"]["kills_by_means"]["MOD_TRIGGER_HURT"] == 1
    assert report["game_1"]["kills_by_means"]["MOD_ROCKET_SPLASH"] == 1
    assert report["game_1"]["kills_by_means"]["MOD_SUICIDE"] == 0
    assert report["game_2"]["players"] == ["Zeh"]
    assert report["game_3"] == {
        "total_kills": 0,
        "players": [],
        "kills": {},
        "kills_by_means": {means.name: 0 for means in MeansOfDeath},
    }


if __name__ == "__main__":
    sys.exit(pytest.main([__file__]))
