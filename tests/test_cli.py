"""Tests for the command-line interface."""

import uuid
from datetime import date

import pytest
from click.testing import CliRunner

from training_tracker.cli import cli
from training_tracker.journal import TrainingJournal


@pytest.fixture
def runner():
    return CliRunner()


class TestPlanCommands:
    def test_plans_lists_catalog(self, runner):
        result = runner.invoke(cli, ["plans"])

        assert result.exit_code == 0
        assert "Polarized" in result.output

    def test_experiment_with_export(self, runner, tmp_path):
        target = tmp_path / "report.csv"

        result = runner.invoke(cli, [
            "experiment", "--weeks", "2", "--sessions", "3", "--runs", "50",
            "--plan", "polarized", "--plan", "Base Endurance", "--export", str(target),
        ])

        assert result.exit_code == 0, result.output
        assert "Plans simulated: 2" in result.output
        lines = target.read_text(encoding="utf-8").splitlines()
        assert lines[0].startswith("Plan;")
        assert len(lines) == 1 + 2 + 1 + 4

    def test_experiment_export_to_directory(self, runner, tmp_path):
        result = runner.invoke(cli, [
            "experiment", "--weeks", "2", "--runs", "50", "--plan", "Polarized",
            "--export", str(tmp_path),
        ])

        assert result.exit_code == 0, result.output
        assert len(list(tmp_path.glob("experiment-report-*.csv"))) == 1

    def test_experiment_trajectory(self, runner):
        result = runner.invoke(cli, [
            "experiment", "--weeks", "3", "--runs", "50", "--plan", "Polarized", "--trajectory",
        ])

        assert result.exit_code == 0, result.output
        assert "Trajectory" in result.output

    def test_experiment_defaults_to_whole_catalog(self, runner):
        result = runner.invoke(cli, ["experiment", "--weeks", "2", "--sessions", "3", "--runs", "50"])

        assert result.exit_code == 0, result.output
        assert "Plans simulated: 5" in result.output

    def test_experiment_rejects_out_of_range(self, runner):
        result = runner.invoke(cli, ["experiment", "--weeks", "1"])

        assert result.exit_code == 2
        assert "--weeks" in result.output

    def test_experiment_unknown_plan(self, runner):
        result = runner.invoke(cli, ["experiment", "--runs", "50", "--plan", "Nope"])

        assert result.exit_code == 0
        assert "Unknown training plan" in result.output


class TestLogCommands:
    def test_add_list_and_stats(self, runner, global_db):
        result = runner.invoke(cli, [
            "log", "add", "--date", "2024-03-05", "--type", "Run",
            "--duration", "40", "--intensity", "6", "--notes", "tempo",
        ])
        assert result.exit_code == 0, result.output
        assert "05.03.2024" in result.output

        result = runner.invoke(cli, ["log", "list"])
        assert result.exit_code == 0
        assert "Run" in result.output

        result = runner.invoke(cli, ["log", "stats"])
        assert result.exit_code == 0
        assert "Total Sessions:" in result.output

    def test_add_rejects_blank_type(self, runner, global_db):
        result = runner.invoke(cli, ["log", "add", "--type", "  ", "--duration", "30", "--intensity", "5"])

        assert "must not be empty" in result.output
        assert TrainingJournal(global_db).get_sessions() == []

    def test_add_rejects_intensity_out_of_range(self, runner, global_db):
        result = runner.invoke(cli, ["log", "add", "--type", "Run", "--duration", "30", "--intensity", "11"])

        assert result.exit_code == 2

    def test_remove(self, runner, global_db):
        session = TrainingJournal(global_db).add_session(date(2024, 1, 1), "Run", 30, 5)

        result = runner.invoke(cli, ["log", "remove", str(session.id)])
        assert "Session removed" in result.output

        result = runner.invoke(cli, ["log", "remove", str(uuid.uuid4())])
        assert "No session with that ID" in result.output

        result = runner.invoke(cli, ["log", "remove", "not-a-uuid"])
        assert "Not a valid session ID" in result.output

    def test_list_empty(self, runner, global_db):
        result = runner.invoke(cli, ["log", "list"])

        assert "No sessions logged yet" in result.output

    def test_export(self, runner, global_db, tmp_path):
        runner.invoke(cli, ["log", "add", "--type", "Swim", "--duration", "30", "--intensity", "4"])
        target = tmp_path / "sessions.csv"

        result = runner.invoke(cli, ["log", "export", str(target)])

        assert result.exit_code == 0, result.output
        assert target.read_text(encoding="utf-8").startswith("Date;Type;")

    def test_reset(self, runner, global_db):
        runner.invoke(cli, ["log", "add", "--type", "Run", "--duration", "30", "--intensity", "5"])

        result = runner.invoke(cli, ["reset"], input="y\n")

        assert "reset successfully" in result.output
        assert TrainingJournal(global_db).get_sessions() == []
