"""Tests for CLI commands using Click's testing utilities."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from lifereel import __version__
from lifereel.cli import cli

pytestmark = pytest.mark.usefixtures("clean_config")


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


# =============================================================================
# Group Tests
# =============================================================================


class TestGroup:
    """Tests for global options."""

    def test_version_option(self, runner: CliRunner) -> None:
        """Test lifereel --version shows version."""
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "lifereel" in result.output
        assert __version__ in result.output

    def test_help_lists_commands(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in ("age", "buckets", "range"):
            assert command in result.output

    def test_missing_config_file(self, runner: CliRunner, tmp_path: Path) -> None:
        """Test an explicit config path that does not exist fails cleanly."""
        result = runner.invoke(cli, ["--config", str(tmp_path / "nope.yaml"), "age", "2024-01-15"])

        assert result.exit_code == 1
        assert "not found" in result.output


# =============================================================================
# Age Command Tests
# =============================================================================


class TestAgeCommand:
    """Tests for the age command."""

    def test_postnatal(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["age", "2024-01-15", "2024-03-20"])

        assert result.exit_code == 0
        assert "2 months, 5 days" in result.output

    def test_pregnancy(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["age", "2024-06-01", "2023-09-10"])

        assert result.exit_code == 0
        assert "3 weeks, 6 days pregnant" in result.output

    def test_with_name(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["age", "2024-01-15", "2024-01-15", "--name", "Ada"])

        assert result.exit_code == 0
        assert "Ada is Newborn" in result.output

    def test_bad_date(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["age", "January"])

        assert result.exit_code == 2


# =============================================================================
# Range Command Tests
# =============================================================================


class TestRangeCommand:
    """Tests for the range command."""

    def test_month_window(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["range", "2 Months", "--birth", "2024-01-15"])

        assert result.exit_code == 0
        assert "2024-03-15 00:00:00 -> 2024-04-15 00:00:00" in result.output

    def test_open_start(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["range", "Pregnancy", "--birth", "2024-06-01"])

        assert result.exit_code == 0
        assert "(earliest)" in result.output

    def test_unknown_label(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["range", "Someday", "--birth", "2024-06-01"])

        assert result.exit_code == 1
        assert "Cannot resolve" in result.output


# =============================================================================
# Buckets Command Tests
# =============================================================================


class TestBucketsCommand:
    """Tests for the buckets command."""

    def test_fine_buckets_oldest_first(self, runner: CliRunner, photo_folder: Path) -> None:
        result = runner.invoke(cli, ["buckets", str(photo_folder), "--birth", "2024-01-15"])

        assert result.exit_code == 0
        assert "4 photos, fine buckets" in result.output
        titles = ["35 Weeks and 6 Days Pregnant", "Birth Month", "2 Months", "1 Year"]
        positions = [result.output.index(title) for title in titles]
        assert positions == sorted(positions)

    def test_latest_first(self, runner: CliRunner, photo_folder: Path) -> None:
        result = runner.invoke(
            cli, ["buckets", str(photo_folder), "--birth", "2024-01-15", "--order", "latest"]
        )

        assert result.exit_code == 0
        assert result.output.index("1 Year") < result.output.index("Birth Month")

    def test_coarse_buckets(self, runner: CliRunner, photo_folder: Path) -> None:
        result = runner.invoke(
            cli, ["buckets", str(photo_folder), "--birth", "2024-01-15", "-g", "coarse"]
        )

        assert result.exit_code == 0
        assert "Pregnancy" in result.output
        assert "0 Months" in result.output
        assert "Birth Month" not in result.output

    def test_reports_skipped_files(self, runner: CliRunner, photo_folder: Path) -> None:
        result = runner.invoke(cli, ["buckets", str(photo_folder), "--birth", "2024-01-15"])

        assert "1 file(s) had no capture date" in result.output

    def test_missing_folder(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["buckets", str(tmp_path / "missing"), "--birth", "2024-01-15"])

        assert result.exit_code == 2
