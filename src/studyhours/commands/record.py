"""record / pomodoro — write study hours."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from studyhours.commands._base import StudyCommand
from studyhours.output.renderers import render_alert

if TYPE_CHECKING:
    from studyhours.commands._context import AppContext
    from studyhours.domain.pomodoro import AlertSink


@click.command(
    cls=StudyCommand,
    examples="""\
  studyhours record bash 3
  studyhours --json record "Docker Compose" 2""",
)
@click.argument("subject")
@click.argument("hours", type=int)
@click.pass_obj
def record(app: AppContext, subject: str, hours: int) -> None:
    """Add HOURS of study to SUBJECT."""
    app.emit(app.service.record_manual(subject, hours))


@click.command(
    cls=StudyCommand,
    examples="""\
  # Focus for one pomodoro, then credit one hour to tdd
  studyhours pomodoro tdd""",
)
@click.argument("subject")
@click.pass_obj
def pomodoro(app: AppContext, subject: str) -> None:
    """Run a pomodoro for SUBJECT and credit one hour when it ends."""
    app.emit(app.service.record_pomodoro(subject, alert_printer(app, subject)))


def alert_printer(app: AppContext, subject: str) -> AlertSink | None:
    """Alert sink echoing to stdout, or None when output is JSON/quiet."""
    if app.settings.json_output or app.settings.quiet:
        return None

    def notify(message: str) -> None:
        click.echo(render_alert(subject, message))

    return notify
