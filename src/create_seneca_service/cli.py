"""Root CLI command for create-seneca-service."""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import click

from create_seneca_service import __version__
from create_seneca_service.commands._base import BootstrapCommand
from create_seneca_service.commands._context import AppContext
from create_seneca_service.config.settings import BootstrapSettings

PROG_NAME = "create-seneca-service"

_EXAMPLES = """\
  create-seneca-service my-seneca-service
  create-seneca-service my-service --scripts-version 2.1.0
  create-seneca-service my-service --scripts-version file:../seneca-scripts
  create-seneca-service my-service --scripts-version https://host/seneca-scripts-0.2.0.tgz
  create-seneca-service my-service --scripts-version git+https://github.com/org/seneca-scripts.git#v1.2.3"""


def _missing_directory() -> NoReturn:
    click.echo("Please specify the project directory:", err=True)
    click.echo(f"  {PROG_NAME} <project-directory>", err=True)
    click.echo(err=True)
    click.echo("For example:", err=True)
    click.echo(f"  {PROG_NAME} my-seneca-service", err=True)
    click.echo(err=True)
    click.echo(f"Run {PROG_NAME} --help to see all options.", err=True)
    raise SystemExit(1)


def _first_positional(values: list[str]) -> str | None:
    """Pick the directory out of what click left unparsed.

    Unknown options are passed through as plain arguments, so one given
    before the directory lands in the argument slot.
    """
    return next((value for value in values if not value.startswith("-")), None)


@click.command(
    PROG_NAME,
    cls=BootstrapCommand,
    examples=_EXAMPLES,
    context_settings={"ignore_unknown_options": True, "allow_extra_args": True},
)
@click.version_option(version=__version__, prog_name=PROG_NAME)
@click.argument("project_directory", metavar="<project-directory>", required=False)
@click.option(
    "--scripts-version",
    metavar="<alternative-package>",
    default=None,
    help="Use a non-standard version of seneca-scripts.",
)
@click.option("-v", "--verbose", is_flag=True, help="Verbose installer output and debug logs.")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    project_directory: str | None,
    scripts_version: str | None,
    verbose: bool,
    json_output: bool,
    quiet: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """Create a new Seneca service in <project-directory>.

    Only <project-directory> is required.
    """
    project_directory = _first_positional(
        [project_directory, *ctx.args] if project_directory else list(ctx.args)
    )
    if project_directory is None:
        _missing_directory()

    settings = BootstrapSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    app = AppContext(settings)

    from create_seneca_service.services.bootstrap import BootstrapService

    app.emit(
        BootstrapService(settings, progress=app.progress).create_project(
            project_directory,
            scripts_version=scripts_version,
            verbose=verbose,
            original_directory=Path.cwd(),
        )
    )
