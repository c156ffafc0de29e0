"""``async-doctor fix``: apply the suggested fix for one finding."""

from pathlib import Path
from typing import Optional

import typer

from ..analysis import StaticAnalyzer, apply_fix
from ..exceptions import AsyncDoctorError
from . import app
from ._common import console, err_console


@app.command()
def fix(
    issue_id: int = typer.Option(..., "--id", help="ID of the issue to fix (from analyze)"),
    target: Path = typer.Argument(
        Path("."),
        help="Project directory (default: current directory)",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    test_cmd: Optional[str] = typer.Option(
        None,
        "--test-cmd",
        help="Command run after the fix; the fix is reverted if it fails (e.g. 'npm test')",
    ),
) -> None:
    """Apply the suggested refactor for a given issue ID."""
    root = target.resolve()
    try:
        analyzer = StaticAnalyzer()
        report = analyzer.analyze(root)
        finding = report.get(issue_id)
        if finding is None:
            err_console.print(f"[red]Issue ID {issue_id} not found.[/red]")
            raise typer.Exit(1)

        if test_cmd:
            console.print(f"Applying fix for issue {issue_id}, then running [bold]{test_cmd}[/bold]...")
        outcome = apply_fix(root, finding, analyzer=analyzer, test_cmd=test_cmd)
    except AsyncDoctorError as e:
        err_console.print(f"[red]Failed to apply fix:[/red] {e}")
        raise typer.Exit(1)

    if outcome.reverted:
        err_console.print(f"[red]{outcome.message}[/red]")
        raise typer.Exit(1)
    if outcome.applied:
        console.print(f"[green]{outcome.message}[/green] Backup: {outcome.backup}")
    else:
        console.print(outcome.message)
