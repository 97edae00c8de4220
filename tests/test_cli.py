"""
Tests for the command line interface.
"""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from lashbook import __version__
from lashbook.cli.app import app

runner = CliRunner()

CONFIG_YAML = """
timezone: America/Santiago
log_level: WARNING
providers:
  - id: studio-ana
    studio_name: Ana Lash Studio
    working_hours:
      - {day: 1, start: "09:00", end: "12:00"}
      - {day: 2, start: "09:00", end: "10:00"}
      - {day: 0, start: "10:00", end: "14:00", is_working: false}
    breaks:
      - {start: "11:00", end: "11:30"}
    services:
      - {id: classic, name: Classic lash set, duration: 90, price: 25000}
      - {id: lift, name: Lash lift, duration: 45, price: 18000, is_active: false}
"""


@pytest.fixture
def config_path(tmp_path) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG_YAML, encoding="utf-8")
    return path


class TestProvidersCommand:
    """Tests for `lashbook providers`."""

    def test_lists_providers(self, config_path):
        result = runner.invoke(app, ["providers", "-c", str(config_path)])

        assert result.exit_code == 0
        assert "studio-ana" in result.output
        assert "Ana Lash Studio" in result.output

    def test_missing_config(self, tmp_path):
        result = runner.invoke(app, ["providers", "-c", str(tmp_path / "missing.yaml")])

        assert result.exit_code == 1
        assert "Config file not found" in result.output


class TestSlotsCommand:
    """Tests for `lashbook slots`."""

    def test_free_slots(self, config_path):
        # 2026-10-19 is a Monday
        result = runner.invoke(app, ["slots", "studio-ana", "--date", "2026-10-19", "-c", str(config_path)])

        assert result.exit_code == 0
        assert "5 free slot(s)" in result.output
        assert "09:00" in result.output
        assert "11:30" in result.output

    def test_booked_intervals_removed(self, config_path):
        result = runner.invoke(app, [
            "slots", "studio-ana", "--date", "2026-10-19",
            "--booked", "09:00-10:00", "-b", "11:30-12:00",
            "-c", str(config_path),
        ])

        assert result.exit_code == 0
        assert "2 free slot(s)" in result.output
        assert "10:00" in result.output
        assert "10:30" in result.output

    def test_fully_booked(self, config_path):
        # Tuesday only opens 09:00-10:00
        result = runner.invoke(app, [
            "slots", "studio-ana", "--date", "2026-10-20",
            "--booked", "09:00-10:00", "-c", str(config_path),
        ])

        assert result.exit_code == 0
        assert "Fully booked" in result.output

    def test_not_working(self, config_path):
        result = runner.invoke(app, ["slots", "studio-ana", "--date", "2026-10-18", "-c", str(config_path)])

        assert result.exit_code == 0
        assert "Not working on this day" in result.output

    def test_custom_slot_size(self, config_path):
        result = runner.invoke(app, [
            "slots", "studio-ana", "--date", "2026-10-19", "--slot-minutes", "60",
            "-c", str(config_path),
        ])

        assert result.exit_code == 0
        assert "2 free slot(s)" in result.output

    def test_unknown_provider(self, config_path):
        result = runner.invoke(app, ["slots", "nobody", "--date", "2026-10-19", "-c", str(config_path)])

        assert result.exit_code == 1
        assert "Unknown provider" in result.output

    def test_invalid_date(self, config_path):
        result = runner.invoke(app, ["slots", "studio-ana", "--date", "tomorrow", "-c", str(config_path)])

        assert result.exit_code == 1
        assert "Invalid date" in result.output

    def test_invalid_booked_interval(self, config_path):
        result = runner.invoke(app, [
            "slots", "studio-ana", "--date", "2026-10-19", "--booked", "09:00", "-c", str(config_path),
        ])

        assert result.exit_code != 0


class TestCheckCommand:
    """Tests for `lashbook check`."""

    def test_conflict(self):
        result = runner.invoke(app, ["check", "--start", "10:00", "--duration", "30", "-b", "09:45-10:15"])

        assert result.exit_code == 1
        assert "Conflict" in result.output

    def test_adjacent_is_available(self):
        result = runner.invoke(app, ["check", "--start", "10:00", "--duration", "30", "-b", "10:30-11:00"])

        assert result.exit_code == 0
        assert "Available" in result.output
        assert "10:00-10:30" in result.output

    def test_invalid_start(self):
        result = runner.invoke(app, ["check", "--start", "25:00", "--duration", "30"])

        assert result.exit_code == 1
        assert "Invalid time format" in result.output


class TestVersionCommand:
    """Tests for `lashbook version`."""

    def test_version(self):
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert __version__ in result.output
