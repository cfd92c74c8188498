# ==============================================================================
# Tests for the Loyalty CLI
# ==============================================================================
"""
Tests for the CLI command tree and the report, seed and config commands.

These tests use the real app from loyalty.app so the full command tree is
wired up and Typer can introspect every command signature.
"""

import json

from typer.testing import CliRunner

from loyalty.app import app

from conftest import DAY2, log_line

runner = CliRunner()


def _write_days(write_log):
    day1 = write_log(
        "d1.log",
        [log_line(1, p) for p in ("blog", "dashboard", "shop")]
        + [log_line(3, p) for p in ("blog", "profile", "shop")]
        + ["garbage line that will not parse"],
    )
    day2 = write_log(
        "d2.log",
        [log_line(1, "blog", DAY2), log_line(1, "about", DAY2)]
        + [log_line(3, "shop", DAY2), log_line(3, "contact", DAY2)],
    )
    return day1, day2


# ==============================================================================
# Help output
# ==============================================================================


class TestHelp:
    """Every command renders its help."""

    def test_root_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Loyal user analysis over daily activity logs" in result.output
        for cmd in ("report", "seed", "config"):
            assert cmd in result.output, f"Missing command: {cmd}"

    def test_report_help(self):
        result = runner.invoke(app, ["report", "--help"])
        assert result.exit_code == 0
        for option in ("--min-pages", "--workers", "--parser", "--timeout", "--json"):
            assert option in result.output

    def test_seed_help(self):
        result = runner.invoke(app, ["seed", "--help"])
        assert result.exit_code == 0
        assert "--output-dir" in result.output

    def test_config_help(self):
        result = runner.invoke(app, ["config", "--help"])
        assert result.exit_code == 0
        assert "show" in result.output


# ==============================================================================
# report
# ==============================================================================


class TestReportCommand:
    """Tests for `loyalty report`."""

    def test_json_output(self, write_log):
        day1, day2 = _write_days(write_log)
        result = runner.invoke(app, ["report", str(day1), str(day2), "--json", "-w", "2"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["loyal_user_ids"] == [1, 3]
        assert data["loyal_count"] == 2
        assert data["days"][0]["skipped"] == 1

    def test_human_output(self, write_log):
        day1, day2 = _write_days(write_log)
        result = runner.invoke(app, ["report", str(day1), str(day2)])
        assert result.exit_code == 0, result.output
        assert "Loyal user count" in result.stdout
        assert "[1, 3]" in result.stdout
        assert "1 malformed line(s) skipped" in result.stdout

    def test_human_output_without_skipped_lines(self, write_log):
        day1 = write_log("d1.log", [log_line(1, "home")])
        day2 = write_log("d2.log", [log_line(1, "home", DAY2)])
        result = runner.invoke(app, ["report", str(day1), str(day2)])
        assert result.exit_code == 0, result.output
        assert "malformed" not in result.stdout

    def test_min_pages_option(self, write_log):
        day1, day2 = _write_days(write_log)
        result = runner.invoke(app, ["report", str(day1), str(day2), "-m", "5", "--json"])
        assert json.loads(result.stdout)["loyal_user_ids"] == []

    def test_json_parser_option(self, write_log):
        day1, day2 = _write_days(write_log)
        result = runner.invoke(app, ["report", str(day1), str(day2), "-p", "json", "--json"])
        assert json.loads(result.stdout)["loyal_user_ids"] == [1, 3]

    def test_missing_file(self, write_log, tmp_path):
        day1, _ = _write_days(write_log)
        result = runner.invoke(app, ["report", str(day1), str(tmp_path / "missing.log")])
        assert result.exit_code == 1
        assert "Failed to process logs" in result.stdout

    def test_missing_file_json(self, write_log, tmp_path):
        day1, _ = _write_days(write_log)
        result = runner.invoke(
            app, ["report", str(day1), str(tmp_path / "missing.log"), "--json"]
        )
        assert result.exit_code == 1
        assert "error" in json.loads(result.stdout)

    def test_timeout(self, write_log):
        day1, day2 = _write_days(write_log)
        result = runner.invoke(app, ["report", str(day1), str(day2), "--timeout", "0"])
        assert result.exit_code == 2
        assert "Timed out" in result.stdout

    def test_files_from_settings(self, write_log, tmp_path, monkeypatch):
        day1, day2 = _write_days(write_log)
        monkeypatch.setenv("LOYALTY_PIPELINE_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("LOYALTY_PIPELINE_DAY1_FILE", day1.name)
        monkeypatch.setenv("LOYALTY_PIPELINE_DAY2_FILE", day2.name)
        result = runner.invoke(app, ["report", "--json"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["loyal_count"] == 2


# ==============================================================================
# seed and config
# ==============================================================================


class TestSeedCommand:
    """Tests for `loyalty seed`."""

    def test_writes_files(self, tmp_path):
        result = runner.invoke(
            app, ["seed", "-o", str(tmp_path), "-u", "100", "-n", "200", "--seed", "1"]
        )
        assert result.exit_code == 0, result.output
        assert (tmp_path / "logs_2024-10-01.log").exists()
        assert (tmp_path / "logs_2024-10-02.log").exists()
        assert "Generated loyal users: " in result.stdout

    def test_start_date(self, tmp_path):
        result = runner.invoke(app, ["seed", "-o", str(tmp_path), "-n", "10", "-d", "2025-01-31"])
        assert result.exit_code == 0, result.output
        assert (tmp_path / "logs_2025-02-01.log").exists()

    def test_seed_then_report(self, tmp_path):
        runner.invoke(app, ["seed", "-o", str(tmp_path), "-u", "100", "-n", "300", "-s", "3"])
        result = runner.invoke(
            app,
            [
                "report",
                str(tmp_path / "logs_2024-10-01.log"),
                str(tmp_path / "logs_2024-10-02.log"),
                "--json",
            ],
        )
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["loyal_count"] >= 18


class TestConfigCommand:
    """Tests for `loyalty config show`."""

    def test_json(self, monkeypatch):
        monkeypatch.setenv("LOYALTY_AGGREGATOR_MIN_PAGES", "7")
        result = runner.invoke(app, ["config", "show", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["aggregator"]["min_pages"] == 7
        assert data["reader"]["parser"] == "scan"

    def test_human(self):
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        for section in ("Reader", "Aggregator", "Pipeline", "Seed"):
            assert section in result.stdout
