"""Shared CLI helpers."""

from pathlib import Path
from typing import Iterable, Optional

from rich.console import Console
from rich.table import Table

from ..config import AnalysisConfig, load_config
from ..models import Finding, MergedFinding, OverlaySummary

console = Console()
err_console = Console(stderr=True)


def resolve_config(
    config: Optional[Path] = None,
    workers: Optional[int] = None,
) -> AnalysisConfig:
    """Build analysis config from CLI options."""
    overrides = {}
    if workers is not None:
        overrides["workers"] = workers
    return load_config(config_file=config, **overrides)


def findings_table(findings: Iterable[Finding]) -> Table:
    table = Table(show_edge=False, header_style="bold")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("File:Line")
    table.add_column("Rule", style="magenta")
    table.add_column("Description")
    table.add_column("Fix", justify="center")
    for f in findings:
        table.add_row(
            str(f.id),
            f"{f.file}:{f.line}",
            f.rule,
            f.message,
            "[green]yes[/green]" if f.fixable else "[dim]-[/dim]",
        )
    return table


def merged_table(findings: Iterable[MergedFinding]) -> Table:
    table = Table(show_edge=False, header_style="bold")
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("File:Line")
    table.add_column("Rule", style="magenta")
    table.add_column("Runs", justify="right")
    for item in findings:
        f = item.finding
        runs = f"[bold green]{item.exec_count}[/bold green]" if item.exec_count else "[dim]0[/dim]"
        table.add_row(str(f.id), f"{f.file}:{f.line}", f.rule, runs)
    return table


def summary_table(summary: OverlaySummary) -> Table:
    table = Table(show_header=False, show_edge=False, box=None, padding=(0, 1))
    table.add_column("key", style="bold", width=20)
    table.add_column("value")
    table.add_row("Trace events:", str(summary.total_events))
    table.add_row("User events:", str(summary.user_events))
    table.add_row("Library events:", str(summary.library_events))
    table.add_row("I/O events:", str(summary.io_events))
    table.add_row("Executed findings:", str(summary.executed_finding_count))
    for rule, count in summary.per_rule_executed_counts.items():
        table.add_row(f"  {rule}", str(count))
    return table
