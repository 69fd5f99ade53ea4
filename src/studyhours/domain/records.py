"""Subject records and the ranked report."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Protocol, TypeAlias

from pydantic import BaseModel, Field


class SubjectRecord(BaseModel):
    """Accumulated hours for one subject."""

    model_config = {"frozen": True}

    subject: str = Field(min_length=1)
    hours: int = Field(ge=0)


Report: TypeAlias = list[SubjectRecord]


def rank_records(records: Iterable[SubjectRecord]) -> Report:
    """Order records by hours descending, then subject ascending."""
    return sorted(records, key=lambda r: (-r.hours, r.subject))


def report_from_mapping(totals: Mapping[str, int]) -> Report:
    """Build a ranked report from a ``subject -> hours`` mapping."""
    return rank_records(SubjectRecord(subject=s, hours=h) for s, h in totals.items())


class Ledger(Protocol):
    """Durable mapping of subject to accumulated hours.

    ``record_hour`` must be an atomic insert-or-increment: concurrent
    increments on the same subject are never lost. All methods raise
    :class:`~studyhours.domain.errors.StorageUnavailableError` when the
    backend fails; ``get_hours`` raises
    :class:`~studyhours.domain.errors.SubjectNotFoundError` for unknown
    subjects.
    """

    def record_hour(self, subject: str, amount: int) -> None: ...

    def get_hours(self, subject: str) -> int: ...

    def get_report(self) -> Report: ...
