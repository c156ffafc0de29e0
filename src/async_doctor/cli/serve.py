"""``async-doctor serve``: HTTP API for analysis jobs."""

from pathlib import Path

import typer

from . import app
from ._common import console


@app.command()
def serve(
    ctx: typer.Context,
    port: int = typer.Option(8787, help="Port to listen on"),
    host: str = typer.Option("127.0.0.1", help="Host to bind to"),
    jobs_dir: Path = typer.Option(Path(".async-doctor/jobs"), "--jobs-dir", help="Where job data is kept"),
) -> None:
    """Serve the analysis job API (analyze, trace upload, merged report)."""
    try:
        from ..server import _check_deps

        _check_deps()
    except ImportError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1)

    from ..server.lifecycle import launch_server

    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    launch_server(jobs_dir, console, host=host, port=port, verbose=verbose)
