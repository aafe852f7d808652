"""Tests for crontable CLI."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from crontable import __version__
from crontable.cli import app


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture
def temp_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary home directory and patch paths."""
    crontable_dir = tmp_path / ".crontable"
    crontable_dir.mkdir()

    monkeypatch.setattr("crontable.cli.CRONTABLE_DIR", crontable_dir)
    monkeypatch.setattr("crontable.cli.JOBS_FILE", crontable_dir / "jobs.yaml")
    monkeypatch.setattr("crontable.config.CONFIG_FILE", crontable_dir / "config.yaml")
    monkeypatch.delenv("CRONTABLE_TIMEZONE", raising=False)
    monkeypatch.delenv("CRONTABLE_RESOLUTION", raising=False)

    return tmp_path


@pytest.fixture
def jobs_file(temp_home: Path) -> Path:
    """Write a jobs file with a passing and a failing job."""
    path = temp_home / ".crontable" / "jobs.yaml"
    path.write_text(
        """\
timezone: UTC
jobs:
  - name: ok
    schedule: "*/5 * * * *"
    command: echo fine
  - name: bad
    schedule: "0 3 * * 1-5"
    command: exit 2
"""
    )
    return path


class TestHelp:
    """Tests for help output."""

    def test_help_shows_commands(self, runner: CliRunner) -> None:
        """Test help shows available commands."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("check", "next", "list", "run", "serve", "version"):
            assert command in result.output


class TestVersion:
    """Tests for version command."""

    def test_version(self, runner: CliRunner) -> None:
        """Test version command shows version."""
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestCheck:
    """Tests for check command."""

    def test_valid_expression(self, runner: CliRunner) -> None:
        """Test a valid expression prints its fields."""
        result = runner.invoke(app, ["check", "*/15 9-17 * * 1-5"])

        assert result.exit_code == 0
        assert "is valid" in result.output
        assert "0,15,30,45" in result.output
        assert "9-17" in result.output
        assert "1-5" in result.output

    def test_invalid_expression(self, runner: CliRunner) -> None:
        """Test an invalid expression exits with an error."""
        result = runner.invoke(app, ["check", "* * * * * *"])

        assert result.exit_code == 1
        assert "Invalid expression" in result.output

    def test_at_matches(self, runner: CliRunner) -> None:
        """Test --at reports a match."""
        result = runner.invoke(app, ["check", "30 9 * * 1", "--at", "2026-10-19T09:30"])

        assert result.exit_code == 0
        assert "Matches" in result.output

    def test_at_does_not_match(self, runner: CliRunner) -> None:
        """Test --at reports a miss."""
        result = runner.invoke(app, ["check", "30 9 * * 1", "--at", "2026-10-20T09:30"])

        assert result.exit_code == 0
        assert "Does not match" in result.output

    def test_at_invalid_datetime(self, runner: CliRunner) -> None:
        """Test --at rejects malformed datetimes."""
        result = runner.invoke(app, ["check", "* * * * *", "--at", "yesterday"])

        assert result.exit_code == 1
        assert "Invalid datetime" in result.output

    def test_unknown_timezone(self, runner: CliRunner) -> None:
        """Test unknown timezones are rejected."""
        result = runner.invoke(
            app, ["check", "* * * * *", "--at", "2026-10-19T09:30", "--timezone", "Nope/Nope"]
        )

        assert result.exit_code == 1
        assert "Unknown timezone" in result.output


class TestNext:
    """Tests for next command."""

    def test_next_runs(self, runner: CliRunner) -> None:
        """Test upcoming run times are listed."""
        result = runner.invoke(
            app, ["next", "0 9 * * 1-5", "--count", "2", "--from", "2026-10-16T10:00"]
        )

        assert result.exit_code == 0
        assert "2026-10-19 09:00" in result.output
        assert "2026-10-20 09:00" in result.output
        assert "2026-10-16" not in result.output

    def test_never_fires(self, runner: CliRunner) -> None:
        """Test an impossible schedule is reported."""
        result = runner.invoke(app, ["next", "0 0 30 2 *", "--from", "2026-01-01T00:00"])

        assert result.exit_code == 0
        assert "does not fire" in result.output

    def test_invalid_expression(self, runner: CliRunner) -> None:
        """Test invalid expressions exit with an error."""
        result = runner.invoke(app, ["next", "a b c d e"])

        assert result.exit_code == 1


class TestList:
    """Tests for list command."""

    def test_list_jobs(self, runner: CliRunner, jobs_file: Path) -> None:
        """Test jobs are listed from the default jobs file."""
        result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        assert "ok" in result.output
        assert "bad" in result.output
        assert "*/5 * * * *" in result.output

    def test_list_json(self, runner: CliRunner, jobs_file: Path) -> None:
        """Test JSON output."""
        result = runner.invoke(app, ["list", "--file", str(jobs_file), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [job["name"] for job in data["jobs"]] == ["ok", "bad"]
        assert data["jobs"][0]["command"] == "echo fine"
        assert data["jobs"][0]["next_run"] is not None

    def test_missing_jobs_file(self, runner: CliRunner, temp_home: Path) -> None:
        """Test a missing jobs file is reported."""
        result = runner.invoke(app, ["list"])

        assert result.exit_code == 1
        assert "Jobs file not found" in result.output

    def test_invalid_jobs_file(self, runner: CliRunner, temp_home: Path) -> None:
        """Test validation errors are listed."""
        path = temp_home / "broken.yaml"
        path.write_text('jobs:\n  - name: x\n    schedule: "* * *"\n    command: date\n')

        result = runner.invoke(app, ["list", "--file", str(path)])

        assert result.exit_code == 1
        assert "Invalid jobs file" in result.output


class TestRun:
    """Tests for run command."""

    def test_run_one(self, runner: CliRunner, jobs_file: Path) -> None:
        """Test running a single job."""
        result = runner.invoke(app, ["run", "ok"])

        assert result.exit_code == 0
        assert "completed" in result.output

    def test_run_failing(self, runner: CliRunner, jobs_file: Path) -> None:
        """Test a failing job exits with an error."""
        result = runner.invoke(app, ["run", "bad"])

        assert result.exit_code == 1
        assert "exited with code 2" in result.output

    def test_run_all(self, runner: CliRunner, jobs_file: Path) -> None:
        """Test running every job reports each one."""
        result = runner.invoke(app, ["run"])

        assert result.exit_code == 1
        assert "ok" in result.output
        assert "completed" in result.output
        assert "failed" in result.output

    def test_run_unknown(self, runner: CliRunner, jobs_file: Path) -> None:
        """Test running an unknown job."""
        result = runner.invoke(app, ["run", "missing"])

        assert result.exit_code == 1
        assert "Job not found" in result.output


class TestServe:
    """Tests for serve command."""

    @pytest.fixture(autouse=True)
    def no_process_setup(self, monkeypatch: pytest.MonkeyPatch) -> list[object]:
        """Keep serve from touching logging, signals or blocking."""
        waited: list[object] = []
        monkeypatch.setattr("crontable.cli.commands.serve.setup_logging", lambda *a: None)
        monkeypatch.setattr("crontable.cli.commands.serve.setup_signal_handlers", lambda e: None)
        monkeypatch.setattr("crontable.cli.commands.serve.wait_for_shutdown", waited.append)
        return waited

    def test_serve_starts_and_stops(
        self,
        runner: CliRunner,
        jobs_file: Path,
        no_process_setup: list[object],
    ) -> None:
        """Test serve schedules the jobs and stops on shutdown."""
        result = runner.invoke(app, ["serve"])

        assert result.exit_code == 0
        assert "Scheduling 2 job(s)" in result.output
        assert "timezone: UTC" in result.output
        assert "Stopped" in result.output
        assert len(no_process_setup) == 1

    def test_serve_timezone_option(self, runner: CliRunner, jobs_file: Path) -> None:
        """Test the timezone option overrides the jobs file."""
        result = runner.invoke(app, ["serve", "--timezone", "Asia/Tokyo"])

        assert result.exit_code == 0
        assert "timezone: Asia/Tokyo" in result.output

    def test_serve_config_timezone(
        self,
        runner: CliRunner,
        temp_home: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test settings apply when the jobs file leaves them out."""
        path = temp_home / "jobs.yaml"
        path.write_text('jobs:\n  - name: a\n    schedule: "* * * * *"\n    command: "true"\n')
        monkeypatch.setenv("CRONTABLE_TIMEZONE", "Europe/Paris")

        result = runner.invoke(app, ["serve", "--file", str(path)])

        assert result.exit_code == 0
        assert "timezone: Europe/Paris" in result.output

    def test_serve_no_jobs(self, runner: CliRunner, temp_home: Path) -> None:
        """Test serve exits when there is nothing to schedule."""
        path = temp_home / "jobs.yaml"
        path.write_text("jobs: []\n")

        result = runner.invoke(app, ["serve", "--file", str(path)])

        assert result.exit_code == 0
        assert "No jobs defined" in result.output

    def test_serve_bad_timezone(self, runner: CliRunner, jobs_file: Path) -> None:
        """Test an unknown timezone is reported before starting."""
        result = runner.invoke(app, ["serve", "--timezone", "Nope/Nope"])

        assert result.exit_code == 1
        assert "Unknown timezone" in result.output
