"""Tests for line-oriented entry parsing."""

import pytest

from studyhours.domain.entries import EntryParseError, StudyEntry, parse_entry


class TestParseEntry:
    def test_manual_entry(self) -> None:
        assert parse_entry("bash 3") == StudyEntry(subject="bash", hours=3)

    def test_pomodoro_entry(self) -> None:
        entry = parse_entry("pomodoro tdd")
        assert entry.is_pomodoro is True
        assert entry.subject == "tdd"
        assert entry.hours == 1

    def test_extra_whitespace_ignored(self) -> None:
        assert parse_entry("  docker   4 ") == StudyEntry(subject="docker", hours=4)

    def test_subject_is_case_sensitive(self) -> None:
        assert parse_entry("TDD 2").subject == "TDD"

    @pytest.mark.parametrize("line", ["", "bash", "pomodoro"])
    def test_not_enough_arguments(self, line: str) -> None:
        with pytest.raises(EntryParseError, match="expected 2 arguments"):
            parse_entry(line)

    def test_non_integer_hours(self) -> None:
        with pytest.raises(EntryParseError, match="failed to parse hours"):
            parse_entry("bash lots")

    @pytest.mark.parametrize("line", ["bash 0", "bash -2"])
    def test_non_positive_hours(self, line: str) -> None:
        with pytest.raises(EntryParseError, match="1 or more"):
            parse_entry(line)

    def test_parse_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            parse_entry("bash x")
