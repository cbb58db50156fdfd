"""Command-line interface for the listen loader.

This module provides the main command-line interface, handling:
- Command-line argument parsing
- Configuration file loading
- Core count detection
- Error reporting

The CLI is built using Typer and provides a user-friendly interface for:
- Checking the listen directives of a server configuration
- Trying the different load modes
- Showing the endpoints and worker threads a server would start

Example:
    # Run from command line:
    $ tunnel-listen check server.conf --mode allow-default --cores 4
"""

from pathlib import Path

import psutil
import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from tunnel_listen import __version__
from tunnel_listen.core.exceptions import TunnelConfigError
from tunnel_listen.core.listen import ListenList, LoadMode
from tunnel_listen.core.options import OptionList
from tunnel_listen.core.utils.log_config import setup_logging

console = Console()
app = typer.Typer(help="Validate listen directives of a tunneling server configuration")


def detect_cores() -> int:
    """Return the number of logical CPUs, at least 1."""
    return psutil.cpu_count(logical=True) or 1


def render_table(listen: ListenList) -> Table:
    """Build a table showing one row per listen entry."""
    table = Table(title="Listen Entries")
    table.add_column("#", style="dim")
    table.add_column("Directive", style="cyan")
    table.add_column("Address", style="green")
    table.add_column("Port")
    table.add_column("Protocol", style="magenta")
    table.add_column("Threads", justify="right")
    table.add_column("SSL")

    for i, spec in enumerate(listen):
        table.add_row(
            str(i),
            spec.directive or "(default)",
            spec.address,
            spec.port or "-",
            str(spec.protocol),
            str(spec.n_threads),
            spec.ssl.value,
        )
    return table


@app.callback(invoke_without_command=True)
def version_callback():
    """Show version information."""
    console.print(f"[cyan]Tunnel Listen v{__version__}[/cyan]")


@app.command(name="check")
def check_config(
    config: Path = typer.Argument(..., help="Server configuration file"),
    directive: str = typer.Option("listen", "--directive", "-d", help="Directive to load"),
    mode: LoadMode = typer.Option(
        LoadMode.NOMINAL, "--mode", "-m", help="Behavior when no directive is found"
    ),
    cores: int | None = typer.Option(
        None, "--cores", "-c", min=1, help="Core count for *N thread specs (default: CPU count)"
    ),
    debug: bool = typer.Option(
        default=False,
        help="Enable debug logging",
    ),
):
    """Load the listen directives of CONFIG and show the resulting entries."""
    setup_logging(level="DEBUG" if debug else "INFO", log_file=debug)

    n_cores = cores if cores is not None else detect_cores()
    logger.info(f"Loading {directive} directives from {config} ({mode.value}, {n_cores} cores)")

    try:
        options = OptionList.from_file(config)
        listen = ListenList.load(options, directive, mode, n_cores)
    except OSError as e:
        logger.error(f"Cannot read {config}: {e}")
        console.print(f"[red]Error: cannot read {config}: {e}")
        raise typer.Exit(code=1) from e
    except TunnelConfigError as e:
        logger.error(f"Configuration error: {e}")
        console.print(f"[red]Configuration error: {e}")
        raise typer.Exit(code=1) from e

    if listen:
        console.print(render_table(listen))
    else:
        console.print(f"[yellow]No {directive} entries")
    console.print(f"[bold green]Total threads: {listen.total_threads()}")


if __name__ == "__main__":
    app()
