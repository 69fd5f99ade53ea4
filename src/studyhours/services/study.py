"""StudyService — coordinates study input events with the ledger.

The service is stateless apart from its ledger and pomodoro runner, so
any number of threads may call it at once. Every durable change goes
through ``Ledger.record_hour``, which is an atomic increment.

Pomodoro invocations walk ``IDLE -> RUNNING -> COMPLETING -> DONE | FAILED``.
Each call is its own instance of that machine; the final state is
returned in ``data["state"]``.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING

import structlog

from studyhours.domain.errors import LedgerError
from studyhours.domain.pomodoro import POMODORO_YIELD_HOURS, PomodoroState
from studyhours.services._helpers import now_iso
from studyhours.services.base import BaseService
from studyhours.services.result import ServiceResult
from studyhours.services.telemetry import annotate, trace_span, traced

if TYPE_CHECKING:
    from studyhours.config.settings import StudySettings
    from studyhours.domain.pomodoro import AlertSink, Pomodoro, Timer
    from studyhours.domain.records import Ledger

log = structlog.get_logger(__name__)


def _is_valid_hours(hours: object) -> bool:
    # bool is an int subclass; True must not count as one hour.
    return isinstance(hours, int) and not isinstance(hours, bool) and hours >= 1


class StudyService(BaseService):
    """Records manual hours and pomodoro sessions, and serves reads."""

    def __init__(self, ledger: Ledger, pomodoro: Pomodoro) -> None:
        super().__init__(ledger)
        self._pomodoro = pomodoro

    @property
    def pomodoro(self) -> Pomodoro:
        return self._pomodoro

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    @traced
    def record_manual(self, subject: str, hours: int) -> ServiceResult:
        """Add *hours* (>= 1) to *subject*."""
        op = "record_manual"
        if invalid := self._check_subject(op, subject):
            return invalid
        if not _is_valid_hours(hours):
            return ServiceResult.failure(
                op,
                "INVALID_AMOUNT",
                f"hours must be a positive integer, got {hours!r}",
                hours=hours,
            )

        try:
            with trace_span("ledger.record_hour", subject=subject, hours=hours):
                self._ledger.record_hour(subject, hours)
        except LedgerError as exc:
            return self._ledger_failure(op, exc, subject=subject, hours=hours)

        log.info("hours.recorded", subject=subject, hours=hours)
        return ServiceResult(ok=True, op=op, data={"subject": subject, "hours": hours})

    @traced
    def record_pomodoro(self, subject: str, notify: AlertSink | None = None) -> ServiceResult:
        """Run one pomodoro for *subject*, then credit one hour.

        Blocks for the full session. A ledger failure after the timer
        has finished is returned as-is; the session is not retried.
        """
        op = "record_pomodoro"
        if invalid := self._check_subject(op, subject):
            return invalid

        data: dict[str, object] = {"subject": subject, "started_at": now_iso()}
        minutes = self._pomodoro.duration.total_seconds() / 60

        log.info("pomodoro.state", subject=subject, state=PomodoroState.RUNNING, minutes=minutes)
        with trace_span("pomodoro.timer", minutes=minutes):
            self._pomodoro.start(notify)

        log.debug("pomodoro.state", subject=subject, state=PomodoroState.COMPLETING)
        try:
            with trace_span("ledger.record_hour", subject=subject, hours=POMODORO_YIELD_HOURS):
                self._ledger.record_hour(subject, POMODORO_YIELD_HOURS)
        except LedgerError as exc:
            log.warning(
                "pomodoro.state", subject=subject, state=PomodoroState.FAILED, error=str(exc)
            )
            return self._ledger_failure(op, exc, **data, state=PomodoroState.FAILED.value)

        log.info("pomodoro.state", subject=subject, state=PomodoroState.DONE)
        return ServiceResult(
            ok=True,
            op=op,
            data={**data, "hours": POMODORO_YIELD_HOURS, "state": PomodoroState.DONE.value},
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @traced
    def get_hours(self, subject: str) -> ServiceResult:
        """Current total for *subject*, or ``SUBJECT_NOT_FOUND``."""
        op = "get_hours"
        try:
            hours = self._ledger.get_hours(subject)
        except LedgerError as exc:
            return self._ledger_failure(op, exc, subject=subject)
        return ServiceResult(ok=True, op=op, data={"subject": subject, "hours": hours})

    @traced
    def get_report(self) -> ServiceResult:
        """All subjects ranked by hours descending (ties by name)."""
        op = "report"
        try:
            report = self._ledger.get_report()
        except LedgerError as exc:
            return self._ledger_failure(op, exc)
        items = [record.model_dump() for record in report]
        annotate(count=len(items))
        return ServiceResult(ok=True, op=op, data={"items": items, "count": len(items)})

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _check_subject(op: str, subject: str) -> ServiceResult | None:
        if not isinstance(subject, str) or not subject.strip():
            return ServiceResult.failure(
                op, "INVALID_SUBJECT", "subject must be a non-empty string", subject=subject
            )
        return None


def build_study_service(settings: StudySettings, *, timer: Timer | None = None) -> StudyService:
    """Wire a :class:`StudyService` from settings.

    Opens (and if needed creates) the configured database. Failure to
    open storage propagates to the caller.
    """
    from studyhours.domain.pomodoro import Pomodoro
    from studyhours.infrastructure.database.engine import init_database
    from studyhours.infrastructure.ledger import SqlLedger
    from studyhours.infrastructure.timer import SleepingTimer

    engine = init_database(settings.database_url, busy_timeout=settings.database.busy_timeout)
    duration = timedelta(minutes=settings.pomodoro.duration_minutes)
    pomodoro = Pomodoro(
        timer or SleepingTimer(),
        duration=duration,
        alerts=None if settings.pomodoro.alerts else (),
    )
    return StudyService(SqlLedger(engine), pomodoro)
