"""Parsing of line-oriented study entries.

Accepted forms::

    {subject} {hours}     e.g. "bash 3"
    pomodoro {subject}    e.g. "pomodoro tdd"
"""

from __future__ import annotations

from dataclasses import dataclass

POMODORO_KEYWORD = "pomodoro"
QUIT_KEYWORD = "quit"


class EntryParseError(ValueError):
    """Raised when a line cannot be turned into a study entry."""


@dataclass(frozen=True)
class StudyEntry:
    """A decoded entry: manual hours, or a pomodoro request."""

    subject: str
    hours: int = 1
    is_pomodoro: bool = False


def parse_entry(line: str) -> StudyEntry:
    """Parse one input line into a :class:`StudyEntry`.

    Raises:
        EntryParseError: On missing arguments or a non-positive /
            non-integer hour count.
    """
    args = line.split()
    if len(args) < 2:
        msg = f"expected 2 arguments, got {len(args)}"
        raise EntryParseError(msg)

    if args[0] == POMODORO_KEYWORD:
        return StudyEntry(subject=args[1], is_pomodoro=True)

    try:
        hours = int(args[1])
    except ValueError as exc:
        msg = f"failed to parse hours {args[1]!r}"
        raise EntryParseError(msg) from exc
    if hours <= 0:
        msg = f"hours must be 1 or more, got {hours}"
        raise EntryParseError(msg)
    return StudyEntry(subject=args[0], hours=hours)
