"""Tests for the command-line interface."""

import json

import pytest
from typer.testing import CliRunner

from activity_heatmap import cli
from activity_heatmap.config import ACTIVE_HOURS_KEY

runner = CliRunner()


@pytest.fixture
def paths(tmp_path):
    return {
        "db": str(tmp_path / "intervals.sqlite3"),
        "config": str(tmp_path / "config.json"),
    }


def _add(paths, interval_id, end, duration, category="farm", tier="1"):
    return runner.invoke(
        cli.app,
        [
            "add",
            interval_id,
            "--end",
            end,
            "--duration",
            str(duration),
            "--category",
            category,
            "--tier",
            tier,
            "--db",
            paths["db"],
        ],
    )


# ----------------------------------------------------------------------
# Intervals
# ----------------------------------------------------------------------


def test_add_and_list_weeks(paths):
    result = _add(paths, "a", "2024-01-08T14:45:00", 1800)
    assert result.exit_code == 0
    assert "Recorded a (farm)." in result.output

    _add(paths, "b", "2024-01-16T10:00:00", 600)
    result = runner.invoke(cli.app, ["weeks", "--db", paths["db"]])
    assert result.exit_code == 0
    lines = result.output.strip().splitlines()
    assert lines == [
        "2024-01-14  Week of Jan 14, 2024",
        "2024-01-07  Week of Jan 7, 2024",
    ]


def test_add_rejects_bad_timestamp(paths):
    result = _add(paths, "a", "yesterday", 60)
    assert result.exit_code != 0


def test_add_rejects_offset_timestamp(paths):
    result = _add(paths, "a", "2024-01-08T14:45:00+05:00", 1800)
    assert result.exit_code == 2

    result = runner.invoke(cli.app, ["weeks", "--db", paths["db"]])
    assert "No activity recorded." in result.output


def test_add_rejects_duration_past_date_range(paths):
    result = _add(paths, "a", "2024-01-08T14:45:00", 1e15)
    assert result.exit_code == 2

    result = runner.invoke(cli.app, ["weeks", "--db", paths["db"]])
    assert "No activity recorded." in result.output


def test_weeks_when_empty(paths):
    result = runner.invoke(cli.app, ["weeks", "--db", paths["db"]])
    assert result.exit_code == 0
    assert "No activity recorded." in result.output


def test_remove(paths):
    _add(paths, "a", "2024-01-08T14:45:00", 60)
    result = runner.invoke(cli.app, ["remove", "a", "--db", paths["db"]])
    assert result.exit_code == 0
    assert "Removed a." in result.output

    result = runner.invoke(cli.app, ["remove", "a", "--db", paths["db"]])
    assert result.exit_code == 1


# ----------------------------------------------------------------------
# Summary
# ----------------------------------------------------------------------


def test_summary_for_selected_week(paths):
    _add(paths, "a", "2024-01-08T14:45:00", 1800)
    _add(paths, "b", "2024-01-16T10:00:00", 600)
    result = runner.invoke(
        cli.app,
        ["summary", "--week", "2024-01-09", "--db", paths["db"], "--config", paths["config"]],
    )
    assert result.exit_code == 0
    assert "Week of Jan 7, 2024" in result.output
    assert "30min" in result.output


def test_summary_rejects_bad_week(paths):
    result = runner.invoke(
        cli.app,
        ["summary", "--week", "01/09/2024", "--db", paths["db"], "--config", paths["config"]],
    )
    assert result.exit_code == 2


def test_summary_without_data(paths):
    result = runner.invoke(
        cli.app, ["summary", "--db", paths["db"], "--config", paths["config"]]
    )
    assert result.exit_code == 0
    assert "No activity recorded." in result.output


# ----------------------------------------------------------------------
# Active hours
# ----------------------------------------------------------------------


class TestActiveHours:
    def test_shows_disabled_by_default(self, paths):
        result = runner.invoke(cli.app, ["active-hours", "--config", paths["config"]])
        assert result.exit_code == 0
        assert "Active hours: disabled" in result.output

    def test_enable_with_partial_update(self, paths, tmp_path):
        result = runner.invoke(
            cli.app, ["active-hours", "--start", "9", "--config", paths["config"]]
        )
        assert "Active hours: 09:00-23:00" in result.output

        stored = json.loads((tmp_path / "config.json").read_text(encoding="utf-8"))
        assert stored[ACTIVE_HOURS_KEY] == {"startHour": 9, "endHour": 23, "enabled": True}

        result = runner.invoke(
            cli.app, ["active-hours", "--end", "17", "--config", paths["config"]]
        )
        assert "Active hours: 09:00-17:00" in result.output

    def test_disable_and_reset(self, paths):
        runner.invoke(cli.app, ["active-hours", "--start", "6", "--config", paths["config"]])
        result = runner.invoke(cli.app, ["active-hours", "--disable", "--config", paths["config"]])
        assert "Active hours: disabled" in result.output

        result = runner.invoke(cli.app, ["active-hours", "--reset", "--config", paths["config"]])
        assert "Active hours: disabled" in result.output

    def test_rejects_out_of_range_hour(self, paths):
        result = runner.invoke(
            cli.app, ["active-hours", "--start", "24", "--config", paths["config"]]
        )
        assert result.exit_code == 2


def test_web_passes_options(monkeypatch, paths):
    calls = {}

    def fake_run_dashboard(**kwargs):
        calls.update(kwargs)

    monkeypatch.setattr(cli, "run_dashboard", fake_run_dashboard)
    result = runner.invoke(
        cli.app,
        [
            "web",
            "--port",
            "9000",
            "--no-open-browser",
            "--log-level",
            "DEBUG",
            "--db",
            paths["db"],
            "--config",
            paths["config"],
        ],
    )
    assert result.exit_code == 0
    assert calls["port"] == 9000
    assert calls["open_browser"] is False
    assert calls["log_level"] == "debug"
    assert str(calls["db_path"]) == paths["db"]


def test_web_rejects_unknown_log_level(monkeypatch, paths):
    monkeypatch.setattr(cli, "run_dashboard", lambda **kwargs: None)
    result = runner.invoke(
        cli.app, ["web", "--log-level", "loud", "--db", paths["db"], "--no-open-browser"]
    )
    assert result.exit_code == 2
