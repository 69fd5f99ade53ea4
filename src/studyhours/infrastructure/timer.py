"""Wall-clock timer: blocks with ``time.sleep``, alerts on daemon threads."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Sequence
from datetime import timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from studyhours.domain.pomodoro import Alert, AlertSink

logger = logging.getLogger(__name__)


class _ScheduledAlert:
    """One alert delivered exactly once, by its timer thread or by ``flush``."""

    def __init__(self, alert: Alert, notify: AlertSink, due: bool) -> None:
        self._alert = alert
        self._notify = notify
        self._lock = threading.Lock()
        self._delivered = False
        self._thread: threading.Timer | None = None
        if due:
            self._thread = threading.Timer(max(alert.offset.total_seconds(), 0.0), self.deliver)
            self._thread.daemon = True
            self._thread.start()

    def deliver(self) -> None:
        with self._lock:
            if self._delivered:
                return
            self._delivered = True
        try:
            self._notify(self._alert.message)
        except Exception:
            logger.debug("Alert delivery failed: %s", self._alert.message, exc_info=True)

    def flush(self) -> None:
        """Deliver now if still pending, and wait for an in-flight delivery."""
        if self._thread is not None:
            self._thread.cancel()
        self.deliver()
        if self._thread is not None:
            self._thread.join()


class SleepingTimer:
    """Real :class:`~studyhours.domain.pomodoro.Timer`.

    Alerts inside the session fire on daemon threads while the caller
    sleeps. Once the sleep ends, every alert (including those at or past
    the end) has been delivered, in schedule order, before ``start``
    returns.

    Parameters:
        sleep: Blocking wait taking seconds. Defaults to :func:`time.sleep`.
    """

    def __init__(self, sleep: Callable[[float], None] = time.sleep) -> None:
        self._sleep = sleep

    def start(
        self,
        duration: timedelta,
        alerts: Sequence[Alert] = (),
        notify: AlertSink | None = None,
    ) -> None:
        scheduled: list[_ScheduledAlert] = []
        if notify is not None:
            ordered = sorted(alerts, key=lambda a: a.offset)
            scheduled = [_ScheduledAlert(a, notify, due=a.offset < duration) for a in ordered]
        self._sleep(duration.total_seconds())
        for pending in scheduled:
            pending.flush()
