"""Server lifecycle: startup banner, serving, and shutdown."""

from __future__ import annotations

import logging
import signal
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..storage import JobStore

logger = logging.getLogger(__name__)


def _format_status_display(host: str, port: int, jobs_root: Path) -> Panel:
    """Build the Rich panel shown while the server starts."""
    table = Table(show_header=False, show_edge=False, box=None, padding=(0, 1))
    table.add_column("key", style="bold", width=10)
    table.add_column("value")

    url = f"http://{host}:{port}"
    table.add_row("API:", f"[link={url}/api/health]{url}/api[/link]")
    table.add_row("Jobs:", str(jobs_root))

    return Panel(table, title="[bold]Async Doctor Server[/bold]", border_style="cyan")


def launch_server(
    jobs_root: Path,
    console: Console,
    host: str = "127.0.0.1",
    port: int = 8787,
    verbose: bool = False,
) -> None:
    """Serve the job API until interrupted."""
    import uvicorn

    from .app import create_app

    jobs_root = Path(jobs_root).resolve()
    jobs_root.mkdir(parents=True, exist_ok=True)
    store = JobStore(jobs_root)

    config = uvicorn.Config(
        create_app(store),
        host=host,
        port=port,
        log_level="warning" if not verbose else "info",
    )
    server = uvicorn.Server(config)

    _original_sigint = signal.getsignal(signal.SIGINT)
    _original_sigterm = signal.getsignal(signal.SIGTERM)

    def _signal_handler(signum, frame):
        """Handle SIGINT/SIGTERM for graceful shutdown."""
        sig_name = "SIGINT" if signum == signal.SIGINT else "SIGTERM"
        logger.info("Received %s, initiating shutdown...", sig_name)
        console.print(f"\n[yellow]Received {sig_name}, stopping server...[/yellow]")
        server.should_exit = True

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    console.print(_format_status_display(host, port, jobs_root))
    console.print("[dim]Ctrl+C to stop[/dim]")

    try:
        server.run()
    except SystemExit:
        pass
    except Exception as exc:
        logger.exception("Server error: %s", exc)
        console.print(f"[red]Server error:[/red] {exc}")
    finally:
        try:
            signal.signal(signal.SIGINT, _original_sigint)
            signal.signal(signal.SIGTERM, _original_sigterm)
        except (OSError, ValueError):
            pass  # not in the main thread
        console.print("  [green]OK[/green] Server stopped cleanly")
