"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, studyhours.toml only contains
overrides. An empty (or missing) file is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class DatabaseConfig(BaseModel):
    """[database] section.

    ``url`` defaults to a SQLite file under the project root when unset.
    """

    model_config = {"frozen": True}

    url: str | None = None
    busy_timeout: float = Field(default=30.0, gt=0)


class PomodoroConfig(BaseModel):
    """[pomodoro] section."""

    model_config = {"frozen": True}

    duration_minutes: float = Field(default=25, gt=0)
    alerts: bool = True


class ServerConfig(BaseModel):
    """[server] section."""

    model_config = {"frozen": True}

    host: str = "127.0.0.1"
    port: int = Field(default=5000, ge=1, le=65535)
