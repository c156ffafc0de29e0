"""``async-doctor trace``: run a Python program under the tracer."""

from pathlib import Path
from typing import List, Optional

import typer

from ..config import TracerConfig
from ..exceptions import AsyncDoctorError
from ..tracer import run_traced
from . import app
from ._common import err_console


@app.command(context_settings={"allow_interspersed_args": False})
def trace(
    target: str = typer.Argument(..., help="Script to run (or module name with -m)"),
    args: Optional[List[str]] = typer.Argument(None, help="Arguments passed to the program"),
    module: bool = typer.Option(False, "-m", "--module", help="Run TARGET as a module"),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Trace output file (default: trace.json)"),
    stacks: bool = typer.Option(False, "--stacks", help="Record the full stack for every task"),
    root: Optional[Path] = typer.Option(
        None, "--root", help="Project root; frames under it count as user code (default: cwd)"
    ),
) -> None:
    """
    Record asyncio task lifecycles of a program and write them as JSON.

    Use [bold]--[/bold] to separate the program's own options:

      async-doctor trace --out trace.json -- app.py --port 8000
    """
    try:
        config = TracerConfig.from_env(
            output=str(out) if out is not None else None,
            capture_stacks=True if stacks else None,
            project_root=str(root.resolve()) if root is not None else None,
        )
    except AsyncDoctorError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if not module and not Path(target).is_file():
        err_console.print(f"[red]No such script:[/red] {target}")
        raise typer.Exit(2)

    try:
        run_traced(target, args or [], module=module, config=config)
    except SystemExit as e:
        code = e.code if isinstance(e.code, int) else (0 if e.code is None else 1)
        raise typer.Exit(code)
