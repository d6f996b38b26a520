#!/usr/bin/env python3
"""
kerntune CLI - Command Line Interface
Applies kernel sysctl settings from sysctl.d style configuration files.
"""

import os
import sys
from typing import Optional, Tuple

import click
from rich.console import Console

from kerntune._version import __version__
from kerntune.core.exceptions import KerntuneError
from kerntune.core.logging import VALID_LEVELS, configure_logging, logger
from kerntune.core.settings import Settings
from kerntune.models.sysctl import OutcomeKind
from kerntune.services.sysctl_service import SysctlService


def _fail_with(error: KerntuneError, headline: Optional[str] = None) -> None:
    """Log the structured error, show its suggestions and exit 1."""
    logger.debug("Error details", error=error.to_dict())
    click.echo(click.style(f"✗ {headline or str(error)}", fg="red"), err=True)
    for suggestion in error.suggestions:
        click.echo(f"  • {suggestion}", err=True)
    sys.exit(1)


def _cat_config(service: SysctlService, config_files: Tuple[str, ...]) -> None:
    """Print every source that would be read, each under a '# path' header."""
    console = Console(highlight=False, soft_wrap=True, emoji=False)
    try:
        sources = service.cat_config(config_files)
    except KerntuneError as e:
        _fail_with(e)
        return

    for index, (path, text) in enumerate(sources):
        if index:
            console.print()
        console.print(f"# {path}", style="bold blue", markup=False)
        console.print(text, markup=False, end="" if text.endswith("\n") else "\n")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="kerntune")
@click.option(
    "--prefix",
    "prefixes",
    multiple=True,
    metavar="PATH",
    help="Only apply rules with the specified path prefix(es)",
)
@click.option("--cat-config", is_flag=True, help="Show configuration files instead of applying them")
@click.option(
    "--log-level",
    type=click.Choice(VALID_LEVELS, case_sensitive=False),
    help="Override the log level from settings",
)
@click.option(
    "--settings",
    "settings_path",
    type=click.Path(dir_okay=False),
    help="YAML settings file (default: $KERNTUNE_CONFIG or /etc/kerntune/kerntune.yaml)",
)
@click.argument("configuration_files", nargs=-1, type=click.Path(dir_okay=False))
def cli(
    prefixes: Tuple[str, ...],
    cat_config: bool,
    log_level: Optional[str],
    settings_path: Optional[str],
    configuration_files: Tuple[str, ...],
):
    """
    Applies kernel sysctl settings.

    Without CONFIGURATION_FILES, every *.conf file in the standard sysctl.d
    directories is read; a file in /etc/sysctl.d masks one with the same
    name in /run, /usr/local/lib and /usr/lib.
    """
    try:
        settings = Settings(settings_path)
    except KerntuneError as e:
        _fail_with(e, f"Invalid settings: {e.message}")
        return

    configure_logging(log_level or settings.log_level, settings.log_file)
    os.umask(0o022)

    service = SysctlService(settings)

    if cat_config:
        _cat_config(service, configuration_files)
        return

    try:
        result = service.run(configuration_files, prefixes)
    except KerntuneError as e:
        logger.error(e.message, **e.context)
        _fail_with(e, e.message)
        return

    if result.load_failure is not None:
        click.echo(
            click.style(f"✗ Failed to load {result.load_failure.describe()}", fg="red"), err=True
        )

    logger.debug(
        "Run complete",
        applied=result.count(OutcomeKind.APPLIED),
        failed=result.count(OutcomeKind.FATAL_FAILURE),
        exit_code=result.exit_code,
    )
    sys.exit(result.exit_code)


def main():
    """Main entry point"""
    try:
        cli()
    except KeyboardInterrupt:
        click.echo("\nOperation cancelled by user.")
        sys.exit(1)
    except Exception as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        if os.environ.get("KERNTUNE_DEBUG"):
            import traceback

            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
