"""Ledger implementations: relational (SQLAlchemy) and in-memory.

Both apply increments atomically. The relational ledger relies on a
single ``INSERT ... ON CONFLICT (subject) DO UPDATE SET hours = hours +
excluded.hours`` statement, so the database serializes concurrent
writers. Reading the total and writing it back would reintroduce lost
updates and is never done.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError

from studyhours.domain.errors import StorageUnavailableError, SubjectNotFoundError
from studyhours.domain.records import SubjectRecord, rank_records, report_from_mapping
from studyhours.infrastructure.database.schema import subjects

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from studyhours.domain.records import Report

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS: dict[str, Any] = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class SqlLedger:
    """Ledger over the ``subjects`` table.

    Parameters:
        engine: Engine whose database already holds the schema
            (see :func:`~studyhours.infrastructure.database.init_database`).
    """

    def __init__(self, engine: Engine) -> None:
        dialect = engine.dialect.name
        if dialect not in _UPSERT_DIALECTS:
            msg = (
                f"Unsupported database dialect: {dialect!r}. "
                f"Expected one of {sorted(_UPSERT_DIALECTS)}"
            )
            raise ValueError(msg)
        self._engine = engine
        self._insert = _UPSERT_DIALECTS[dialect]

    @property
    def engine(self) -> Engine:
        return self._engine

    def record_hour(self, subject: str, amount: int) -> None:
        """Insert *subject* with *amount* hours, or add *amount* to it."""
        stmt = self._insert(subjects).values(subject=subject, hours=amount)
        stmt = stmt.on_conflict_do_update(
            index_elements=[subjects.c.subject],
            set_={"hours": subjects.c.hours + stmt.excluded.hours},
        )
        try:
            with self._engine.begin() as conn:
                conn.execute(stmt)
        except SQLAlchemyError as exc:
            logger.warning("Failed to record %d hours for %r", amount, subject, exc_info=True)
            msg = f"failed to record hours for {subject!r}: {exc}"
            raise StorageUnavailableError(msg) from exc

    def get_hours(self, subject: str) -> int:
        try:
            with self._engine.connect() as conn:
                hours = conn.execute(
                    select(subjects.c.hours).where(subjects.c.subject == subject)
                ).scalar_one_or_none()
        except SQLAlchemyError as exc:
            logger.warning("Failed to read hours for %r", subject, exc_info=True)
            msg = f"failed to read hours for {subject!r}: {exc}"
            raise StorageUnavailableError(msg) from exc
        if hours is None:
            raise SubjectNotFoundError(subject)
        return int(hours)

    def get_report(self) -> Report:
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(
                    select(subjects.c.subject, subjects.c.hours).order_by(
                        subjects.c.hours.desc(), subjects.c.subject.asc()
                    )
                ).fetchall()
        except SQLAlchemyError as exc:
            logger.warning("Failed to build report", exc_info=True)
            msg = f"failed to build report: {exc}"
            raise StorageUnavailableError(msg) from exc
        # Collation differs between backends; re-rank so ties are stable everywhere.
        return rank_records(SubjectRecord(subject=r.subject, hours=r.hours) for r in rows)


class InMemoryLedger:
    """Process-local ledger guarded by a lock. Used for tests and dry runs."""

    def __init__(self, totals: dict[str, int] | None = None) -> None:
        self._totals: dict[str, int] = dict(totals or {})
        self._lock = threading.Lock()

    def record_hour(self, subject: str, amount: int) -> None:
        with self._lock:
            self._totals[subject] = self._totals.get(subject, 0) + amount

    def get_hours(self, subject: str) -> int:
        with self._lock:
            if subject not in self._totals:
                raise SubjectNotFoundError(subject)
            return self._totals[subject]

    def get_report(self) -> Report:
        with self._lock:
            snapshot = dict(self._totals)
        return report_from_mapping(snapshot)
