"""``async-doctor correlate``: overlay a runtime trace on a static report."""

import json
from pathlib import Path
from typing import Optional

import typer

from ..analysis import load_report
from ..correlation import correlate as correlate_events
from ..correlation import load_trace, merge
from ..exceptions import AsyncDoctorError, ReportWriteError
from . import app
from ._common import console, err_console, merged_table, summary_table


@app.command()
def correlate(
    report_path: Path = typer.Argument(..., metavar="REPORT", help="anti-patterns.json from analyze"),
    trace_path: Path = typer.Argument(..., metavar="TRACE", help="Trace JSON from the tracer"),
    root: Optional[Path] = typer.Option(
        None, "--root", help="Project root the report is relative to (default: the report's directory)"
    ),
    out: Optional[Path] = typer.Option(
        None, "--out", "-o", help="Overlay output (default: executions.json next to the report)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Print the merged report as JSON"),
) -> None:
    """Count how often each finding's function ran during the trace."""
    project_root = (root or report_path.parent).resolve()
    overlay_path = out or report_path.parent / "executions.json"

    try:
        report = load_report(report_path)
        events = load_trace(trace_path)
        overlay = correlate_events(report, events, project_root)
        try:
            overlay_path.write_text(json.dumps(overlay.to_dict(), indent=2), encoding="utf-8")
        except OSError as e:
            raise ReportWriteError(overlay_path, str(e))
    except AsyncDoctorError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    merged = merge(report, overlay)
    if json_output:
        console.print_json(json.dumps(merged.to_dict()))
        return

    console.print(summary_table(overlay.summary))
    if merged.findings:
        console.print()
        console.print(merged_table(merged.findings))
    console.print(f"\n[dim]Overlay written to {overlay_path}[/dim]")
