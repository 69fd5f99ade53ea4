"""Subcommand modules for studyhours.

Provides register_commands() which uses deferred imports to keep
``studyhours --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from studyhours.commands.read import hours, report
    from studyhours.commands.record import pomodoro, record
    from studyhours.commands.serve import serve
    from studyhours.commands.track import track

    cli.add_command(record)
    cli.add_command(pomodoro)
    cli.add_command(hours)
    cli.add_command(report)
    cli.add_command(track)
    cli.add_command(serve)
