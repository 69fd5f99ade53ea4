"""Ledger exceptions.

The infrastructure layer raises these; the service layer turns them into
``ServiceError`` payloads carrying the same ``code`` and message.
"""

from __future__ import annotations


class LedgerError(Exception):
    """Base class for failures reported by a ledger implementation."""

    code = "LEDGER_ERROR"


class SubjectNotFoundError(LedgerError):
    """No record exists for the requested subject."""

    code = "SUBJECT_NOT_FOUND"

    def __init__(self, subject: str) -> None:
        super().__init__(f"subject not found: {subject!r}")
        self.subject = subject


class StorageUnavailableError(LedgerError):
    """The backing store could not complete the operation."""

    code = "STORAGE_UNAVAILABLE"
