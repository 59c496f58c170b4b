"""Service query commands for svcstat CLI."""

import json

import click
from rich.console import Console
from rich.table import Table

from svcstat.exceptions import (
    InvalidServiceNameError,
    ServiceNotFoundError,
    ServiceStatusError,
)
from svcstat.models.status import ServiceState, ServiceStatus
from svcstat.resolver import ServiceResolver

console = Console()

STATE_STYLES = {
    ServiceState.RUNNING: "green",
    ServiceState.STOPPED: "red",
    ServiceState.PAUSED: "yellow",
    ServiceState.UNKNOWN: "magenta",
}


def _resolver(ctx: click.Context) -> ServiceResolver:
    """Build a resolver from the CLI context."""
    return ServiceResolver.from_config(ctx.obj.get("config"))


def _fail(message: str) -> None:
    console.print(f"[red]Error:[/red] {message}")
    raise click.Abort()


def _render_status(status: ServiceStatus) -> Table:
    """Render a service status as a two-column table."""
    style = STATE_STYLES.get(status.state.kind, "cyan")
    table = Table(show_header=False, box=None)
    table.add_column(style="bold")
    table.add_column()
    table.add_row("Service", status.name)
    if status.display_name:
        table.add_row("Display name", status.display_name)
    table.add_row("State", f"[{style}]{status.state}[/{style}]")
    table.add_row("PID", str(status.pid) if status.pid else "[dim](not running)[/dim]")
    table.add_row("Raw code", str(status.raw_code))
    if status.backend:
        table.add_row("Backend", status.backend)
    return table


@click.command()
@click.argument("name")
@click.pass_context
def exists_cmd(ctx: click.Context, name: str) -> None:
    """Check whether a service exists.

    Exits with status 0 if the service is registered and 1 otherwise.

    Examples:
        svcstat exists sshd
        svcstat exists wuauserv
    """
    try:
        found = _resolver(ctx).resolve_exists(name)
    except ServiceStatusError as e:
        _fail(str(e))

    if found:
        console.print(f"[green]✓[/green] {name} exists")
    else:
        console.print(f"[yellow]✗[/yellow] {name} is not registered on this system")
        ctx.exit(1)


@click.command()
@click.argument("name")
@click.option("--json", "as_json", is_flag=True, help="Print the status as JSON")
@click.pass_context
def status_cmd(ctx: click.Context, name: str, as_json: bool) -> None:
    """Show the status of a service.

    Examples:
        svcstat status cron
        svcstat status nginx --json
    """
    try:
        status = _resolver(ctx).resolve_status(name)
    except ServiceNotFoundError:
        console.print(f"[red]Service not found:[/red] {name}")
        raise click.Abort() from None
    except InvalidServiceNameError as e:
        raise click.BadParameter(str(e), param_hint="NAME") from None
    except ServiceStatusError as e:
        _fail(str(e))

    if as_json:
        click.echo(json.dumps(status.to_dict()))
    else:
        console.print(_render_status(status))


@click.command()
@click.pass_context
def init_system_cmd(ctx: click.Context) -> None:
    """Show the init system detected on this host."""
    try:
        kind = _resolver(ctx).init_system()
    except ServiceStatusError as e:
        _fail(str(e))

    if kind is None:
        console.print("[dim]Not applicable: Windows uses the Service Control Manager[/dim]")
    else:
        console.print(kind.value)
