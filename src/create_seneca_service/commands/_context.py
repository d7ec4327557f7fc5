"""AppContext — logging setup and centralized result emission.

Created once by the root command. Routes rendered results to
stdout/stderr and owns the exit code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from create_seneca_service.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from create_seneca_service.config.settings import BootstrapSettings
    from create_seneca_service.services.result import ServiceResult


class AppContext:
    """Shared CLI state for one invocation."""

    def __init__(self, settings: BootstrapSettings) -> None:
        self.settings = settings

        from create_seneca_service.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from create_seneca_service.services.telemetry import enable_telemetry

            enable_telemetry()

    def progress(self, message: str) -> None:
        """Print a progress line unless output is JSON or quiet."""
        if self.settings.json_output or self.settings.quiet:
            return
        click.echo(message, err=True)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
            click.echo(output, err=True)
            raise SystemExit(1)
