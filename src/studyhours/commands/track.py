"""track — interactive line-oriented study log."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from studyhours.commands._base import StudyCommand
from studyhours.commands.record import alert_printer
from studyhours.domain.entries import QUIT_KEYWORD, EntryParseError, parse_entry

if TYPE_CHECKING:
    from studyhours.commands._context import AppContext

GREETING = """\
Let's study
Type {subject} {hours} to track hours
Or type 'pomodoro {subject}' to use the pomodoro tracker
Type 'quit' to exit"""


@click.command(
    cls=StudyCommand,
    examples="""\
  studyhours track
  printf 'bash 2\\npomodoro tdd\\nquit\\n' | studyhours track""",
)
@click.pass_obj
def track(app: AppContext) -> None:
    """Read study entries line by line until 'quit' or end of input."""
    if not app.settings.quiet:
        click.echo(GREETING)

    stdin = click.get_text_stream("stdin")
    for line in stdin:
        line = line.strip()
        if not line:
            continue
        if line == QUIT_KEYWORD:
            click.echo("Goodbye!")
            break

        try:
            entry = parse_entry(line)
        except EntryParseError as exc:
            click.echo(f"failed to parse entry: {exc}", err=True)
            continue

        if entry.is_pomodoro:
            click.echo("Pomodoro started...")
            result = app.service.record_pomodoro(entry.subject, alert_printer(app, entry.subject))
        else:
            result = app.service.record_manual(entry.subject, entry.hours)
        app.show(result)
