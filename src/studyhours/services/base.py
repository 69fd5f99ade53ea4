"""BaseService — abstract foundation for studyhours services.

Every service receives a :class:`~studyhours.domain.records.Ledger` at
construction time. There is no process-wide store: callers build the
ledger once and pass it in, and tests pass an in-memory one.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from studyhours.services.result import ServiceResult

if TYPE_CHECKING:
    from studyhours.domain.errors import LedgerError
    from studyhours.domain.records import Ledger

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for service-layer classes.

    Usage::

        class StudyService(BaseService):
            def get_hours(self, subject: str) -> ServiceResult:
                try:
                    hours = self._ledger.get_hours(subject)
                except LedgerError as exc:
                    return self._ledger_failure("get_hours", exc)
                ...
    """

    def __init__(self, ledger: Ledger) -> None:
        self._ledger = ledger

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    @staticmethod
    def _ledger_failure(op: str, exc: LedgerError, **data: object) -> ServiceResult:
        """Convert a ledger exception into a failed result, code unchanged."""
        logger.debug("%s failed: %s", op, exc)
        return ServiceResult.failure(op, exc.code, str(exc), data=dict(data))
