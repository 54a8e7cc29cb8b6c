"""Main CLI application entry point.

Defines the Typer application and the console-script entry point.
"""

import sys
from pathlib import Path
from typing import Annotated

import click
import typer

from syscleaner import __version__
from syscleaner.campaign.orchestrator import CampaignOrchestrator
from syscleaner.core.config import ConfigError, build_run_config
from syscleaner.core.privilege import PrivilegeError, require_root
from syscleaner.utils.formatting import print_banner, print_error

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

app = typer.Typer(
    name="syscleaner",
    help="Safe cleanup of logs, caches, temporary files and shell history.",
    add_completion=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"syscleaner version {__version__}")
        raise typer.Exit()


@app.command()
def clean(
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Test run without making changes."),
    ] = False,
    stealth: Annotated[
        bool,
        typer.Option("--stealth", help="Minimal output, basic cleanup."),
    ] = False,
    stealth_max: Annotated[
        bool,
        typer.Option(
            "--stealth-max",
            help="Full cleanup including temp files, journals and package lists. Implies --stealth.",
        ),
    ] = False,
    backup: Annotated[
        bool,
        typer.Option("--backup", help="Create a backup of logs and root history first."),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Settings file (default: /etc/syscleaner/config.toml)."),
    ] = None,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """Clean system logs, caches, temporary files and shell history.

    Protected system paths are never touched.
    """
    try:
        run_config = build_run_config(
            dry_run=dry_run,
            stealth=stealth,
            stealth_max=stealth_max,
            backup=backup,
            config_path=config,
        )
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=EXIT_FAILURE) from e

    if not run_config.mode.is_stealth:
        print_banner(
            __version__,
            run_config.mode_label,
            run_config.timestamp,
            run_config.session_id,
        )

    try:
        require_root()
    except PrivilegeError as e:
        print_error(str(e))
        raise typer.Exit(code=EXIT_FAILURE) from e

    CampaignOrchestrator(run_config).run()


def main(argv: list[str] | None = None) -> None:
    """Console-script entry point.

    Usage errors such as unknown flags exit with status 1.
    """
    command = typer.main.get_command(app)
    try:
        result = command.main(args=argv, prog_name="syscleaner", standalone_mode=False)
    except click.UsageError as e:
        e.show()
        sys.exit(EXIT_FAILURE)
    except click.Abort:
        print_error("Aborted")
        sys.exit(EXIT_FAILURE)

    sys.exit(result if isinstance(result, int) else EXIT_SUCCESS)


if __name__ == "__main__":
    main()
