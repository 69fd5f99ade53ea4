"""Relational storage via SQLAlchemy Core: engine setup and schema."""

from studyhours.infrastructure.database.engine import (
    create_db_engine,
    default_database_url,
    init_database,
)
from studyhours.infrastructure.database.schema import metadata, subjects

__all__ = [
    "create_db_engine",
    "default_database_url",
    "init_database",
    "metadata",
    "subjects",
]
