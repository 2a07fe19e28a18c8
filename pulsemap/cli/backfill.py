"""Backfill command implementation."""

from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from ..config import Config
from ..db import close_connection_pools, validate_connection
from ..pipeline import BackfillRequest, PipelineOrchestrator

console = Console()


def backfill_command(
    start_date: str = typer.Option(..., "--start", help="First publication day (YYYY-MM-DD)"),
    end_date: str = typer.Option(..., "--end", help="Last publication day (YYYY-MM-DD)"),
    source: str = typer.Option("who", "--source", "-s", help="Source to backfill (who, all)"),
    limit: Optional[int] = typer.Option(
        None,
        "--limit",
        "-l",
        help="Maximum bulletins to fetch (capped at 500)",
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config.yaml. Default: ~/.config/pulsemap/config.yaml",
    ),
) -> None:
    """Merge WHO bulletins published in a date range."""
    try:
        config = Config(config_path)

        if limit is None:
            limit = config.config.backfill.default_limit
        limit = min(limit, config.config.backfill.max_limit)

        try:
            request = BackfillRequest(
                start_date=start_date,
                end_date=end_date,
                source=source,
                limit=limit,
            )
        except ValidationError as e:
            for error in e.errors():
                console.print(f"[red]❌ {error['msg']}[/red]")
            raise typer.Exit(2)

        console.print("[dim]Checking database connection...[/dim]")
        if not validate_connection(config.get_db_config()):
            console.print("[red]❌ Database connection failed![/red]")
            raise typer.Exit(1)

        summary = PipelineOrchestrator(config).backfill(request)

        if not summary.success:
            raise typer.Exit(1)

    except typer.Exit:
        raise
    except KeyboardInterrupt:
        console.print("\n[yellow]Backfill interrupted by user[/yellow]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]Backfill failed: {e}[/red]")
        raise typer.Exit(1)
    finally:
        close_connection_pools()
