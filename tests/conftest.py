"""Shared pytest fixtures and test doubles for studyhours tests."""

from __future__ import annotations

import os
from collections.abc import Generator, Sequence
from datetime import timedelta
from pathlib import Path

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from studyhours.domain.errors import StorageUnavailableError
from studyhours.domain.pomodoro import Alert, AlertSink, Pomodoro
from studyhours.domain.records import Report
from studyhours.infrastructure.database.engine import default_database_url, init_database
from studyhours.infrastructure.ledger import InMemoryLedger, SqlLedger
from studyhours.services.study import StudyService

# ---------------------------------------------------------------------------
# Test doubles
# ---------------------------------------------------------------------------


class SpyTimer:
    """Timer that returns immediately, firing every alert in order."""

    def __init__(self) -> None:
        self.calls: list[timedelta] = []
        self.fired: list[str] = []

    def start(
        self,
        duration: timedelta,
        alerts: Sequence[Alert] = (),
        notify: AlertSink | None = None,
    ) -> None:
        self.calls.append(duration)
        if notify is None:
            return
        for alert in alerts:
            self.fired.append(alert.message)
            notify(alert.message)


class BrokenLedger:
    """Ledger whose backend is always down."""

    def __init__(self) -> None:
        self.record_calls: list[tuple[str, int]] = []

    def record_hour(self, subject: str, amount: int) -> None:
        self.record_calls.append((subject, amount))
        raise StorageUnavailableError("persistent storage failure")

    def get_hours(self, subject: str) -> int:
        raise StorageUnavailableError("persistent storage failure")

    def get_report(self) -> Report:
        raise StorageUnavailableError("persistent storage failure")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Generator[Engine]:
    """Initialized SQLite engine with the schema created."""
    engine = init_database(default_database_url(tmp_path))
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sql_ledger(db_engine: Engine) -> SqlLedger:
    return SqlLedger(db_engine)


@pytest.fixture
def memory_ledger() -> InMemoryLedger:
    return InMemoryLedger()


@pytest.fixture
def broken_ledger() -> BrokenLedger:
    return BrokenLedger()


@pytest.fixture
def spy_timer() -> SpyTimer:
    return SpyTimer()


@pytest.fixture
def study_service(memory_ledger: InMemoryLedger, spy_timer: SpyTimer) -> StudyService:
    """Service over an in-memory ledger and a timer that never sleeps."""
    return StudyService(memory_ledger, Pomodoro(spy_timer))


@pytest.fixture
def _isolated_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run the CLI from a temp directory with a near-instant pomodoro.

    Use via ``@pytest.mark.usefixtures("_isolated_root")`` on command test
    classes. The database is created under ``tmp_path/.studyhours``.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("STUDYHOURS_CONFIG", raising=False)
    monkeypatch.delenv("STUDYHOURS_DATABASE__URL", raising=False)
    monkeypatch.setenv("STUDYHOURS_POMODORO__DURATION_MINUTES", "0.0005")
    monkeypatch.setenv("STUDYHOURS_POMODORO__ALERTS", "false")


@pytest.fixture
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop any ``STUDYHOURS_*`` variables inherited from the shell."""
    for name in list(os.environ):
        if name.startswith("STUDYHOURS_"):
            monkeypatch.delenv(name)
