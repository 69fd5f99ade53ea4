"""Tests for the relational and in-memory ledgers.

Both implementations share the same behavioural suite; the relational
one additionally covers storage failures and dialect selection.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from sqlalchemy.engine import Engine

from studyhours.domain.errors import StorageUnavailableError, SubjectNotFoundError
from studyhours.infrastructure.database.schema import metadata
from studyhours.infrastructure.ledger import InMemoryLedger, SqlLedger


@pytest.fixture(params=["sql", "memory"])
def ledger(request: pytest.FixtureRequest):
    if request.param == "sql":
        return request.getfixturevalue("sql_ledger")
    return request.getfixturevalue("memory_ledger")


class TestRecordAndRead:
    def test_unknown_subject_not_found(self, ledger) -> None:
        with pytest.raises(SubjectNotFoundError) as excinfo:
            ledger.get_hours("never-recorded")
        assert excinfo.value.subject == "never-recorded"
        assert excinfo.value.code == "SUBJECT_NOT_FOUND"

    def test_first_record_inserts(self, ledger) -> None:
        ledger.record_hour("bash", 5)
        assert ledger.get_hours("bash") == 5

    def test_second_record_increments(self, ledger) -> None:
        ledger.record_hour("bash", 5)
        ledger.record_hour("bash", 3)
        assert ledger.get_hours("bash") == 8

    def test_subjects_are_case_sensitive(self, ledger) -> None:
        ledger.record_hour("TDD", 1)
        ledger.record_hour("tdd", 2)
        assert ledger.get_hours("TDD") == 1
        assert ledger.get_hours("tdd") == 2

    def test_subjects_independent(self, ledger) -> None:
        ledger.record_hour("go", 2)
        ledger.record_hour("rust", 7)
        assert ledger.get_hours("go") == 2
        assert ledger.get_hours("rust") == 7


class TestReport:
    def test_empty_report(self, ledger) -> None:
        assert ledger.get_report() == []

    def test_ordered_by_hours_descending(self, ledger) -> None:
        ledger.record_hour("Docker", 4)
        ledger.record_hour("TDD", 6)
        report = ledger.get_report()
        assert [(r.subject, r.hours) for r in report] == [("TDD", 6), ("Docker", 4)]

    def test_ties_ordered_by_subject(self, ledger) -> None:
        for subject in ("zsh", "awk", "make"):
            ledger.record_hour(subject, 2)
        assert [r.subject for r in ledger.get_report()] == ["awk", "make", "zsh"]


class TestConcurrentAccumulation:
    def test_hundred_concurrent_increments(self, ledger) -> None:
        with ThreadPoolExecutor(max_workers=16) as pool:
            futures = [pool.submit(ledger.record_hour, "tdd", 2) for _ in range(100)]
            for future in futures:
                future.result()
        assert ledger.get_hours("tdd") == 200

    def test_overlapping_subjects(self, ledger) -> None:
        ledger.record_hour("go", 10)
        subjects = ["go", "rust", "zig"] * 30
        with ThreadPoolExecutor(max_workers=12) as pool:
            list(pool.map(lambda s: ledger.record_hour(s, 1), subjects))
        assert ledger.get_hours("go") == 40
        assert ledger.get_hours("rust") == 30
        assert ledger.get_hours("zig") == 30


class TestSqlLedgerFailures:
    def test_missing_table_is_storage_unavailable(self, db_engine: Engine) -> None:
        ledger = SqlLedger(db_engine)
        metadata.drop_all(db_engine)
        with pytest.raises(StorageUnavailableError):
            ledger.record_hour("bash", 1)
        with pytest.raises(StorageUnavailableError):
            ledger.get_hours("bash")
        with pytest.raises(StorageUnavailableError):
            ledger.get_report()

    def test_storage_error_chains_cause(self, db_engine: Engine) -> None:
        ledger = SqlLedger(db_engine)
        metadata.drop_all(db_engine)
        with pytest.raises(StorageUnavailableError) as excinfo:
            ledger.record_hour("bash", 1)
        assert excinfo.value.__cause__ is not None
        assert excinfo.value.code == "STORAGE_UNAVAILABLE"

    def test_unsupported_dialect_rejected(self) -> None:
        engine = MagicMock(dialect=SimpleNamespace(name="oracle"))
        with pytest.raises(ValueError, match="Unsupported database dialect"):
            SqlLedger(engine)

    def test_exposes_engine(self, db_engine: Engine) -> None:
        assert SqlLedger(db_engine).engine is db_engine


class TestInMemoryLedger:
    def test_seeded_totals(self) -> None:
        ledger = InMemoryLedger({"bash": 2})
        ledger.record_hour("bash", 1)
        assert ledger.get_hours("bash") == 3

    def test_seed_is_copied(self) -> None:
        seed = {"bash": 2}
        InMemoryLedger(seed).record_hour("bash", 1)
        assert seed == {"bash": 2}
