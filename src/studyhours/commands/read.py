"""hours / report — read accumulated study hours."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from studyhours.commands._base import StudyCommand

if TYPE_CHECKING:
    from studyhours.commands._context import AppContext


@click.command(cls=StudyCommand, examples="  studyhours hours bash\n  studyhours -q hours bash")
@click.argument("subject")
@click.pass_obj
def hours(app: AppContext, subject: str) -> None:
    """Show the total hours recorded for SUBJECT."""
    app.emit(app.service.get_hours(subject))


@click.command(cls=StudyCommand, examples="  studyhours report\n  studyhours --json report")
@click.pass_obj
def report(app: AppContext) -> None:
    """List every subject ranked by hours."""
    app.emit(app.service.get_report())
