import functools
from pathlib import Path

import click
import yaml
from rich.console import Console

from addrpool import __version__
from addrpool.config import LOG_LEVELS, ConfigError, resolve_config, scaffold_config
from addrpool.controller import PoolController
from addrpool.host import HostError
from addrpool.log import setup_logging
from addrpool.pool import PoolError

console = Console()


def handle_errors(fn):
    """Decorator to catch and display common errors."""

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except (ConfigError, PoolError, HostError) as e:
            console.print(f"[bold red]Error:[/bold red] {e}")
            raise SystemExit(1)

    return wrapper


@click.group()
@click.version_option(version=__version__, prog_name="addrpool")
@click.option(
    "-c", "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to a YAML config file",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Override the configured log level",
)
@click.pass_context
def cli(ctx, config_path, log_level):
    """Addrpool - Hand out unique private IPv4 addresses that avoid the host's networks."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["log_level"] = log_level


def _controller(ctx) -> PoolController:
    config = resolve_config(ctx.obj.get("config_path"))
    if ctx.obj.get("log_level"):
        config["logging"]["level"] = ctx.obj["log_level"].upper()
    setup_logging(config["logging"]["level"])
    return PoolController(config)


@cli.command()
@click.option(
    "-n", "--count",
    default=1,
    show_default=True,
    type=click.IntRange(min=1),
    help="Number of addresses to allocate",
)
@click.pass_context
@handle_errors
def get(ctx, count):
    """Allocate addresses from a pool primed with the host's interfaces."""
    _controller(ctx).allocate(count)


@cli.command()
@click.pass_context
@handle_errors
def host(ctx):
    """List host interface addresses and the prefixes they reserve."""
    _controller(ctx).host()


@cli.command()
@click.pass_context
@handle_errors
def status(ctx):
    """Show block weights and counters after scanning the host."""
    _controller(ctx).status()


@cli.command()
@click.argument("path")
@handle_errors
def init(path):
    """Scaffold a YAML configuration file."""
    target = Path(path)
    if target.exists():
        console.print(f"[bold red]File already exists:[/bold red] {target}")
        raise SystemExit(1)

    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "w") as f:
        yaml.dump(scaffold_config(), f, default_flow_style=False, sort_keys=False)

    console.print(f"[bold green]Created config:[/bold green] {target}")
    console.print(f"Run: [bold]addrpool -c {path} get[/bold]")


def main():
    cli(obj={})
