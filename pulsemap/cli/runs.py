"""Runs command implementation."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from ..config import Config
from ..db import RunManager, close_connection_pools, get_connection

console = Console()


def runs_command(
    limit: int = typer.Option(10, "--limit", "-l", help="Number of runs to show", min=1),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config.yaml. Default: ~/.config/pulsemap/config.yaml",
    ),
) -> None:
    """Show recent pipeline runs."""
    try:
        config = Config(config_path)
        with get_connection(config.get_db_config()) as conn:
            runs = RunManager().get_recent_runs(conn, limit)
    except FileNotFoundError:
        console.print("[red]Config file not found. Run 'pulsemap init' first.[/red]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Failed to load runs: {e}[/red]")
        raise typer.Exit(1)
    finally:
        close_connection_pools()

    if not runs:
        console.print("[yellow]No runs found. Run 'pulsemap run' first.[/yellow]")
        return

    table = Table(title="Recent Runs")
    table.add_column("ID", style="dim")
    table.add_column("Kind", style="cyan")
    table.add_column("Started", style="blue")
    table.add_column("Status", style="bold")
    table.add_column("Results", style="yellow")

    status_styles = {"success": "green", "failed": "red", "running": "yellow"}

    for run in runs:
        results = (run.stats_json or {}).get("results") or {}
        details = (
            f"{results.get('new_outbreaks', 0)} outbreaks, "
            f"{results.get('new_reports', 0)} reports"
            if results
            else "-"
        )
        style = status_styles.get(run.status, "white")
        table.add_row(
            run.id or "-",
            run.kind,
            run.started_at.strftime("%Y-%m-%d %H:%M"),
            f"[{style}]{run.status}[/{style}]",
            details,
        )

    console.print(table)
