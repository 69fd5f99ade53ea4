"""Request telemetry — nested timing spans for service calls.

Disabled by default; ``--verbose`` turns it on for the CLI process.
While enabled, each ``@traced`` service method opens a root span,
``trace_span`` blocks open children (ledger writes, the pomodoro wait),
and the finished tree lands in ``ServiceResult.meta["telemetry"]``.

State lives in ContextVars, so concurrent threads and server tasks
each build their own tree.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from studyhours.services.result import ServiceResult

log = structlog.get_logger("studyhours.telemetry")

_enabled: ContextVar[bool] = ContextVar("studyhours_telemetry", default=False)
_active: ContextVar[Span | None] = ContextVar("studyhours_span", default=None)

_P = ParamSpec("_P")
_R = TypeVar("_R")


@dataclass
class Span:
    """One timed step, with optional children and key/value annotations."""

    name: str
    children: list[Span] = field(default_factory=list)
    annotations: dict[str, Any] = field(default_factory=dict)
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None

    @property
    def duration_ms(self) -> float:
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    def close(self) -> None:
        self.finished = time.perf_counter()

    def annotate(self, **fields: Any) -> None:
        self.annotations.update(fields)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        if self.children:
            out["children"] = [child.to_dict() for child in self.children]
        return out


@contextmanager
def _activate(span: Span) -> Iterator[Span]:
    token = _active.set(span)
    try:
        yield span
    finally:
        span.close()
        _active.reset(token)


@contextmanager
def trace_span(name: str, **annotations: Any) -> Iterator[Span | None]:
    """Time a block as a child of the active span.

    Yields None (and records nothing) outside a traced call or while
    telemetry is off.
    """
    parent = _active.get() if _enabled.get() else None
    if parent is None:
        yield None
        return
    child = Span(name=name, annotations=dict(annotations))
    parent.children.append(child)
    with _activate(child):
        yield child


def annotate(**fields: Any) -> None:
    """Attach *fields* to the active span, if any."""
    span = get_current_span()
    if span is not None:
        span.annotate(**fields)


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Wrap a service method in a root span.

    A returned ServiceResult gets the span tree in ``meta["telemetry"]``.
    """

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        span = Span(name=func.__qualname__)
        ok = False
        try:
            with _activate(span):
                result = func(*args, **kwargs)
            if isinstance(result, ServiceResult):
                ok = result.ok
                meta = {**(result.meta or {}), "telemetry": span.to_dict()}
                result = result.model_copy(update={"meta": meta})  # type: ignore[assignment]
            else:
                ok = True
            return result
        finally:
            log.debug(
                "span.complete",
                span_name=span.name,
                duration_ms=round(span.duration_ms, 2),
                ok=ok,
                children=len(span.children),
            )

    return wrapper


def enable_telemetry() -> None:
    """Turn span collection on for the current context."""
    _enabled.set(True)


def disable_telemetry() -> None:
    """Turn span collection off for the current context."""
    _enabled.set(False)


def get_current_span() -> Span | None:
    """The innermost active span, or None when telemetry is off."""
    if not _enabled.get():
        return None
    return _active.get()
