"""Run command implementation."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..config import Config
from ..db import close_connection_pools, validate_connection
from ..pipeline import PipelineOrchestrator

console = Console()


def run_command(
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config.yaml. Default: ~/.config/pulsemap/config.yaml",
    ),
) -> None:
    """Fetch the latest bulletins and merge them into the outbreak store."""
    try:
        # Load configuration
        config = Config(config_path)

        # Validate database connection
        console.print("[dim]Checking database connection...[/dim]")
        if not validate_connection(config.get_db_config()):
            console.print("[red]❌ Database connection failed![/red]")
            console.print("Please check your database configuration and ensure Postgres is running.")
            raise typer.Exit(1)

        summary = PipelineOrchestrator(config).run()

        if not summary.success:
            raise typer.Exit(1)

    except typer.Exit:
        raise
    except KeyboardInterrupt:
        console.print("\n[yellow]Pipeline interrupted by user[/yellow]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Pipeline failed: {e}[/red]")
        raise typer.Exit(1)
    finally:
        close_connection_pools()
