"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy service construction and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from studyhours.output.formatters import OutputSettings, format_result
from studyhours.output.renderers import render_warning

if TYPE_CHECKING:
    from studyhours.config.settings import StudySettings
    from studyhours.services.result import ServiceResult
    from studyhours.services.study import StudyService


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The service (and with it the database) is created lazily on first
    use so ``--help`` and ``--version`` never touch storage.
    """

    def __init__(self, settings: StudySettings) -> None:
        self.settings = settings
        self._service: StudyService | None = None

        from studyhours.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from studyhours.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    @property
    def service(self) -> StudyService:
        """The study service (created lazily on first access)."""
        if self._service is None:
            from sqlalchemy.exc import SQLAlchemyError

            from studyhours.services.study import build_study_service

            try:
                self._service = build_study_service(self.settings)
            except SQLAlchemyError as exc:
                msg = f"Cannot open storage at {self.settings.database_url}: {exc}"
                raise click.ClickException(msg) from exc
        return self._service

    def show(self, result: ServiceResult) -> None:
        """Print a result without affecting the exit code."""
        output = format_result(result, settings=self.output_settings)
        click.echo(output, err=not result.ok)
        if result.ok and not self.settings.json_output:
            for warning in result.warnings:
                click.echo(render_warning(warning), err=True)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
        * Failure: writes to stderr, exits with code 1.
        """
        self.show(result)
        if not result.ok:
            raise SystemExit(1)
