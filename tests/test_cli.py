"""Tests for CLI commands using Click's testing utilities."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

import pytest
from click.testing import CliRunner

from chronology import __version__
from chronology.cli import cli
from chronology.core.models import TimedItem

from conftest import write_items_json

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every command away from any real chronology.yaml."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("chronology.config.DEFAULT_SEARCH_PATHS", [])


@pytest.fixture
def week_file(tmp_path: Path, week_items: list[TimedItem]) -> Path:
    return write_items_json(tmp_path / "week.json", week_items, wrap=True)


# =============================================================================
# Version & Help
# =============================================================================


class TestVersion:
    """Tests for version and help output."""

    def test_version_option(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "Chronology" in result.output
        assert __version__ in result.output

    def test_help_option(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "timeline" in result.output
        assert "config" in result.output


# =============================================================================
# Timeline Command
# =============================================================================


class TestTimelineCommand:
    """Tests for the timeline command."""

    def test_day_tree(self, runner: CliRunner, items_file: Path) -> None:
        """Slots 09..11 with the empty 10 shown and 09:0x collapsed."""
        result = runner.invoke(cli, ["timeline", str(items_file)])

        assert result.exit_code == 0, result.output
        assert "Day timeline" in result.output
        assert "(no items)" in result.output
        assert "09:05 - 09:07" in result.output
        assert "2 Elements" in result.output
        assert "inbox/call.md" in result.output
        assert "4 items across 3 slots" in result.output
        assert "1 items fall outside the day layout" in result.output

    def test_day_tree_without_grouping(self, runner: CliRunner, items_file: Path) -> None:
        result = runner.invoke(cli, ["timeline", str(items_file), "--no-group"])

        assert result.exit_code == 0, result.output
        assert "Elements" not in result.output
        assert "projects/roadmap.md" in result.output
        assert "[C] 09:05" in result.output

    def test_twelve_hour_clock(self, runner: CliRunner, items_file: Path) -> None:
        result = runner.invoke(cli, ["timeline", str(items_file), "--12h"])

        assert result.exit_code == 0, result.output
        assert "09 AM" in result.output
        assert "11:25 AM" in result.output

    def test_json_output(self, runner: CliRunner, items_file: Path) -> None:
        result = runner.invoke(cli, ["timeline", str(items_file), "--format", "json"])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["view"] == "day"
        assert payload["clustered"] is True
        assert [s["label"] for s in payload["slots"]] == ["09", "10", "11"]
        nine = payload["slots"][0]
        assert [c["label"] for c in nine["clusters"]] == ["0", "10", "20"]
        assert [i["path"] for i in nine["clusters"][0]["items"]] == [
            "daily/2024-03-01.md",
            "projects/roadmap.md",
        ]
        assert nine["clusters"][0]["items"][0]["key"] == "daily/2024-03-01.md:created"
        assert [i["path"] for i in payload["unbucketed"]] == ["inbox/late.md"]

    def test_week_view(self, runner: CliRunner, week_file: Path) -> None:
        result = runner.invoke(
            cli, ["timeline", str(week_file), "--view", "week", "--format", "json"]
        )

        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert len(payload["slots"]) == 3
        assert [c["label"] for c in payload["slots"][0]["clusters"]] == [
            "20",
            "16",
            "12",
            "8",
            "4",
            "0",
        ]
        assert payload["unbucketed"] == []

    @pytest.mark.parametrize("view", ["month", "year", "range"])
    def test_views_without_layout(self, runner: CliRunner, items_file: Path, view: str) -> None:
        result = runner.invoke(cli, ["timeline", str(items_file), "--view", view])

        assert result.exit_code == 0, result.output
        assert "no timeline layout" in result.output

    def test_views_without_layout_json(self, runner: CliRunner, items_file: Path) -> None:
        result = runner.invoke(
            cli, ["timeline", str(items_file), "--view", "month", "--format", "json"]
        )

        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload == {"view": "month", "clustered": False, "slots": [], "unbucketed": []}

    def test_empty_items(self, runner: CliRunner, tmp_path: Path) -> None:
        path = write_items_json(tmp_path / "empty.json", [])

        result = runner.invoke(cli, ["timeline", str(path)])

        assert result.exit_code == 0, result.output
        assert "No items to show" in result.output

    def test_only_unplaceable_items(self, runner: CliRunner, tmp_path: Path, make_item) -> None:
        path = write_items_json(
            tmp_path / "late.json", [make_item("late.md", datetime(2024, 3, 1, 9, 55))]
        )

        result = runner.invoke(cli, ["timeline", str(path), "--format", "json"])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert [s["label"] for s in payload["slots"]] == ["09"]
        assert payload["unbucketed"][0]["path"] == "late.md"

    def test_invalid_json_file(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("[{]")

        result = runner.invoke(cli, ["timeline", str(path)])

        assert result.exit_code == 1
        assert "not valid JSON" in result.output

    def test_nonexistent_file(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["timeline", "/nonexistent/items.json"])

        assert result.exit_code != 0

    def test_invalid_view(self, runner: CliRunner, items_file: Path) -> None:
        result = runner.invoke(cli, ["timeline", str(items_file), "--view", "decade"])

        assert result.exit_code != 0

    def test_config_file_applies(self, runner: CliRunner, items_file: Path, tmp_path: Path) -> None:
        config_path = tmp_path / "chronology.yaml"
        config_path.write_text("timeline:\n  use_24_hour_clock: false\n")

        result = runner.invoke(cli, ["--config", str(config_path), "timeline", str(items_file)])

        assert result.exit_code == 0, result.output
        assert "09 AM" in result.output

    def test_flag_overrides_config(
        self, runner: CliRunner, items_file: Path, tmp_path: Path
    ) -> None:
        config_path = tmp_path / "chronology.yaml"
        config_path.write_text("timeline:\n  use_24_hour_clock: false\n")

        result = runner.invoke(
            cli, ["--config", str(config_path), "timeline", str(items_file), "--24h"]
        )

        assert result.exit_code == 0, result.output
        assert "09 AM" not in result.output


# =============================================================================
# Config Command
# =============================================================================


class TestConfigCommand:
    """Tests for the config group."""

    def test_show_defaults(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["config", "show"])

        assert result.exit_code == 0, result.output
        assert "Current Configuration" in result.output
        assert "first_weekday" in result.output

    def test_missing_config_file(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["--config", str(tmp_path / "missing.yaml"), "config", "show"])

        assert result.exit_code == 1
        assert "not found" in result.output
