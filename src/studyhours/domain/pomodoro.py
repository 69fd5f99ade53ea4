"""Pomodoro timer contract and session runner.

A pomodoro is a fixed-length focus session. The runner binds a
:class:`Timer` to a duration and an alert schedule; the coordinator in
:mod:`studyhours.services.study` credits one hour once it completes.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import timedelta
from enum import StrEnum
from typing import Protocol, TypeAlias

DEFAULT_POMODORO_DURATION = timedelta(minutes=25)
POMODORO_YIELD_HOURS = 1

AlertSink: TypeAlias = Callable[[str], None]


class PomodoroState(StrEnum):
    """Lifecycle of a single pomodoro invocation."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETING = "completing"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class Alert:
    """A notification fired *offset* after the timer starts."""

    offset: timedelta
    message: str


def default_alerts(duration: timedelta = DEFAULT_POMODORO_DURATION) -> tuple[Alert, ...]:
    """Started / halfway / complete alerts for a session of *duration*."""
    return (
        Alert(timedelta(0), "Pomodoro started"),
        Alert(duration / 2, "Halfway there"),
        Alert(duration, "Pomodoro complete"),
    )


class Timer(Protocol):
    """Single-shot countdown.

    ``start`` blocks the caller for *duration*. Each alert calls
    *notify* with its message at ``start + offset`` without delaying
    the caller. There is no cancellation.
    """

    def start(
        self,
        duration: timedelta,
        alerts: Sequence[Alert] = (),
        notify: AlertSink | None = None,
    ) -> None: ...


class Pomodoro:
    """Runs one focus session on a :class:`Timer`."""

    def __init__(
        self,
        timer: Timer,
        *,
        duration: timedelta = DEFAULT_POMODORO_DURATION,
        alerts: Sequence[Alert] | None = None,
    ) -> None:
        if duration <= timedelta(0):
            msg = f"Pomodoro duration must be positive, got {duration}"
            raise ValueError(msg)
        self.timer = timer
        self.duration = duration
        self.alerts: tuple[Alert, ...] = (
            default_alerts(duration) if alerts is None else tuple(alerts)
        )

    def start(self, notify: AlertSink | None = None) -> None:
        """Block until the session has run its full duration."""
        alerts = self.alerts if notify is not None else ()
        self.timer.start(self.duration, alerts, notify)
