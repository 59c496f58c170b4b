"""Main CLI entry point for svcstat."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console

from svcstat.cli.query import exists_cmd, init_system_cmd, status_cmd
from svcstat.config import load_config
from svcstat.exceptions import ServiceStatusError

console = Console(stderr=True)


def _setup_logging(debug: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@click.group()
@click.option(
    "--config", "-c", "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to config file",
)
@click.option("--debug/--no-debug", default=False, help="Show debug information")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, debug: bool) -> None:
    """svcstat - Check whether OS services exist and what state they are in.

    Works against the Windows Service Control Manager, systemd, OpenRC
    and SysV init.
    """
    _setup_logging(debug)
    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config(config_path)
    ctx.obj["debug"] = debug


cli.add_command(exists_cmd, name="exists")
cli.add_command(status_cmd, name="status")
cli.add_command(init_system_cmd, name="init-system")


def main() -> None:
    """Main entry point with error handling."""
    try:
        cli()
    except ServiceStatusError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    except Exception as e:
        if "--debug" in sys.argv:
            raise
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
