"""CLI entry point: registers all subcommands."""

from typing import Optional

import typer

from .. import __version__
from ..logging_config import setup_logging
from ._common import console

app = typer.Typer(
    name="async-doctor",
    help="Async Doctor - detect and refactor async/await anti-patterns",
    add_completion=False,
    rich_markup_mode="rich",
)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log errors"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Also write logs to this file", hidden=True),
    version: bool = typer.Option(False, "--version", help="Show version and exit", is_eager=True),
) -> None:
    """
    Detect async/await anti-patterns statically, trace them at runtime,
    and see which of them actually execute.

    [bold cyan]Examples:[/bold cyan]

      async-doctor analyze ./my-app

      async-doctor trace --out trace.json -- app.py

      async-doctor correlate my-app/anti-patterns.json trace.json --root my-app
    """
    if version:
        console.print(f"[bold cyan]Async Doctor[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit(0)

    setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


# Import subcommands to register them
from .analyze import analyze as _analyze  # noqa: F401, E402
from .correlate import correlate as _correlate  # noqa: F401, E402
from .fix import fix as _fix  # noqa: F401, E402
from .serve import serve as _serve  # noqa: F401, E402
from .trace import trace as _trace  # noqa: F401, E402
