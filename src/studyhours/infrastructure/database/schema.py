"""SQLAlchemy Core table definitions for the studyhours database.

A single ``subjects`` table holds the running total per subject. The
unique constraint on ``subject`` is the conflict target for the
increment-or-insert upsert in :mod:`studyhours.infrastructure.ledger`.
"""

from __future__ import annotations

from sqlalchemy import Column, Integer, MetaData, Table, Text

metadata = MetaData()

subjects = Table(
    "subjects",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("subject", Text, nullable=False, unique=True),
    Column("hours", Integer, nullable=False, default=0, server_default="0"),
)
