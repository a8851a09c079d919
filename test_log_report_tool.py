#!/usr/bin/env python3
"""
Tests for the log report and report export command line tools.
"""

import json
import logging
import os
import sys

import pytest

# Add the src directory to the path so we can import the modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from quake_log_tools.tools.log_report import LogReportTool, main

SAMPLE_LOG = "\n".join([
    "  0:00 ------------------------------------------------------------",
    "  0:00 InitGame: \\sv_hostname\\Code Miner Server\\mapname\\q3dm17",
    "  0:01 ClientUserinfoChanged: 2 n\\Isgalamido\\t\\0\\model\\xian/default",
    "  0:02 ClientUserinfoChanged: 3 n\\Zeh\\t\\0\\model\\sarge",
    "  0:10 Kill: 1022 2 19: <world> killed Isgalamido by MOD_FALLING",
    "  0:20 Kill: 3 2 10: Zeh killed Isgalamido by MOD_RAILGUN",
    "  1:00 ShutdownGame:",
    "  1:00 ------------------------------------------------------------",
    "  1:01 InitGame: \\sv_hostname\\Code Miner Server\\mapname\\q3dm6",
    "  1:02 ClientUserinfoChanged: 4 n\\Dono da Bola\\t\\0",
    "",
])


@pytest.fixture
def log_file(tmp_path):
    path = tmp_path / "qgames.log"
    path.write_text(SAMPLE_LOG, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
        handler.close()


def test_main_prints_json(log_file, tmp_path, capsys):
    app_log = tmp_path / "script.log"
    result = main([str(log_file), "-l", str(app_log)])

    assert result == 0
    report = json.loads(capsys.readouterr().out)
    assert list(report) == ["game_1", "game_2"]
    assert report["game_1"]["total_kills"] == 2
    assert report["game_1"]["players"] == ["Isgalamido", "Zeh"]
    assert report["game_1"]["kills"] == {"Isgalamido": -1, "Zeh": 1}
    assert report["game_1"]["kills_by_means"]["MOD_FALLING"] == 1
    assert report["game_1"]["kills_by_means"]["MOD_RAILGUN"] == 1
    assert report["game_2"]["kills"] == {"Dono da Bola": 0}
    assert app_log.exists()


def test_main_writes_json_file(log_file, tmp_path, capsys):
    output = tmp_path / "report.json"
    result = main([str(log_file), "-l", str(tmp_path / "script.log"), "-o", str(output)])

    assert result == 0
    assert capsys.readouterr().out == ""
    report = json.loads(output.read_text(encoding="utf-8"))
    assert report["game_2"]["players"] == ["Dono da Bola"]


def test_main_missing_input(tmp_path, capsys):
    app_log = tmp_path / "script.log"
    result = main([str(tmp_path / "missing.log"), "-l", str(app_log)])

    assert result == 1
    assert "Error:" in capsys.readouterr().err
    assert "missing.log" in app_log.read_text(encoding="utf-8")


def use_profile(monkeypatch, config):
    monkeypatch.setattr(LogReportTool, "load_config", staticmethod(lambda profile: config))


def test_main_ignores_malformed_paths_section(log_file, tmp_path, monkeypatch, capsys):
    use_profile(monkeypatch, {"paths": "qgames.log"})
    monkeypatch.chdir(tmp_path)

    result = main([str(log_file)])

    assert result == 0
    assert list(json.loads(capsys.readouterr().out)) == ["game_1", "game_2"]
    assert (tmp_path / LogReportTool.DEFAULT_APP_LOG).exists()


def test_main_unknown_encoding(log_file, tmp_path, monkeypatch, capsys):
    use_profile(monkeypatch, {"report": {"encoding": "no-such-codec"}})
    app_log = tmp_path / "script.log"

    result = main([str(log_file), "-l", str(app_log)])

    assert result == 1
    assert "Error:" in capsys.readouterr().err
    assert "no-such-codec" in app_log.read_text(encoding="utf-8")


def test_tool_run_with_config(log_file, tmp_path):
    config = {
        "general": {"output_path": str(tmp_path / "out")},
        "paths": {"log_file": str(log_file)},
    }
    tool = LogReportTool(config)
    result = tool.run(output_path="report.json")

    assert result["success"]
    assert result["match_count"] == 2
    assert result["kill_count"] == 2
    assert result["output_file"] == str(tmp_path / "out" / "report.json")


def test_tool_rejects_unknown_format(log_file):
    tool = LogReportTool()
    report = tool.build_report(str(log_file))
    with pytest.raises(ValueError):
        tool.write_report(report, report_format="yaml")


def test_csv_export(log_file, tmp_path):
    pd = pytest.importorskip("pandas")

    tool = LogReportTool()
    report = tool.build_report(str(log_file))
    written = tool.write_report(report, str(tmp_path / "report.csv"), report_format="csv")

    assert written == [
        str(tmp_path / "report_kills.csv"),
        str(tmp_path / "report_kills_by_means.csv"),
    ]
    kills = pd.read_csv(tmp_path / "report_kills.csv")
    assert list(kills.columns) == ["game", "player", "kills"]
    assert kills[kills["player"] == "Isgalamido"]["kills"].tolist() == [-1]

    means = pd.read_csv(tmp_path / "report_kills_by_means.csv")
    assert list(means.columns) == ["game", "means", "kills"]
    assert len(means) == 2 * 29
    assert means["kills"].sum() == 2


def test_excel_export(log_file, tmp_path):
    pd = pytest.importorskip("pandas")
    pytest.importorskip("openpyxl")

    from quake_log_tools.tools.report_to_excel import ReportToExcelTool

    report_path = tmp_path / "report.json"
    tool = LogReportTool()
    tool.write_report(tool.build_report(str(log_file)), str(report_path))

    exporter = ReportToExcelTool()
    excel_path = tmp_path / "report.xlsx"
    assert exporter.run(str(report_path), str(excel_path)) == 0

    sheets = pd.read_excel(excel_path, sheet_name=None)
    assert list(sheets) == ["summary", "kills", "kills_by_means"]
    assert sheets["summary"]["total_kills"].tolist() == [2, 0]
    assert sheets["summary"]["players"].tolist()[0] == "Isgalamido, Zeh"


def test_excel_export_missing_report(tmp_path):
    pytest.importorskip("pandas")
    pytest.importorskip("openpyxl")

    from quake_log_tools.tools.report_to_excel import ReportToExcelTool

    exporter = ReportToExcelTool()
    assert exporter.run(str(tmp_path / "missing.json"), str(tmp_path / "report.xlsx")) == 1


if __name__ == "__main__":
    sys.exit(pytest.main([__file__]))
