"""Tests for the record and pomodoro commands."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from studyhours.cli import cli


@pytest.mark.usefixtures("_isolated_root")
class TestRecordCommand:
    def test_record_then_read(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["record", "bash", "5"])
        assert result.exit_code == 0, result.output
        assert "record_manual" in result.output

        cli_runner.invoke(cli, ["record", "bash", "3"])
        result = cli_runner.invoke(cli, ["-q", "hours", "bash"])
        assert result.exit_code == 0
        assert result.output.strip() == "8"

    def test_json_output(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "record", "tdd", "2"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["ok"] is True
        assert data["data"] == {"subject": "tdd", "hours": 2}

    @pytest.mark.parametrize("hours", ["0", "-2"])
    def test_non_positive_fails(self, cli_runner: CliRunner, hours: str) -> None:
        result = cli_runner.invoke(cli, ["record", "bash", "--", hours])
        assert result.exit_code == 1
        assert "INVALID_AMOUNT" in result.output

        lookup = cli_runner.invoke(cli, ["hours", "bash"])
        assert lookup.exit_code == 1
        assert "SUBJECT_NOT_FOUND" in lookup.output

    def test_non_integer_is_usage_error(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["record", "bash", "lots"])
        assert result.exit_code == 2

    def test_examples_flag(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["record", "--examples"])
        assert result.exit_code == 0
        assert "studyhours record bash 3" in result.output


@pytest.mark.usefixtures("_isolated_root")
class TestPomodoroCommand:
    def test_credits_one_hour(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["--json", "pomodoro", "tdd"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["op"] == "record_pomodoro"
        assert data["data"]["state"] == "done"

        lookup = cli_runner.invoke(cli, ["-q", "hours", "tdd"])
        assert lookup.output.strip() == "1"

    def test_adds_to_existing_total(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["record", "tdd", "4"])
        cli_runner.invoke(cli, ["pomodoro", "tdd"])
        lookup = cli_runner.invoke(cli, ["-q", "hours", "tdd"])
        assert lookup.output.strip() == "5"
