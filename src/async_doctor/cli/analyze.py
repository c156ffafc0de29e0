"""``async-doctor analyze``: static scan of a project."""

from pathlib import Path
from typing import Optional

import typer

from ..analysis import StaticAnalyzer, write_report
from ..exceptions import AsyncDoctorError
from . import app
from ._common import console, err_console, findings_table, resolve_config


@app.command()
def analyze(
    target: Path = typer.Argument(
        Path("."),
        help="Project directory to analyze (default: current directory)",
        exists=True,
        file_okay=False,
        dir_okay=True,
        readable=True,
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Write the findings as JSON into the target directory",
    ),
    out: Optional[Path] = typer.Option(
        None,
        "--out",
        "-o",
        help="Write the JSON report here instead (implies --json)",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    workers: Optional[int] = typer.Option(
        None,
        "-w",
        "--workers",
        help="Parallel workers (default: auto-detect)",
        min=1,
        max=32,
        hidden=True,
    ),
) -> None:
    """
    Find async/await anti-patterns in JavaScript and TypeScript sources.

    Exits 0 whether or not anything was found; 1 only when files cannot
    be read or the report cannot be written.
    """
    try:
        settings = resolve_config(config=config, workers=workers)
        report = StaticAnalyzer(settings).analyze(target)

        if json_output or out is not None:
            path = out or target / settings.report_filename
            write_report(report, path)
            console.print(f"[green]Anti-patterns saved to:[/green] {path}")
        else:
            console.print(f"Found [bold]{len(report.findings)}[/bold] async anti-pattern instance(s)")
            if report.findings:
                console.print(findings_table(report.findings))

        for skip in report.skipped:
            err_console.print(f"[yellow]Skipped[/yellow] {skip.path}: {skip.reason}")

    except AsyncDoctorError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)