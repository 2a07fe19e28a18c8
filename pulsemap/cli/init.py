"""Init command implementation."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel

from ..config import DEFAULT_CONFIG_PATH, Config, ConfigModel, save_config
from ..db import init_database, validate_connection

console = Console()


def init_command(
    config_path: Path = typer.Option(
        DEFAULT_CONFIG_PATH,
        "--config",
        "-c",
        help="Where to write config.yaml",
    ),
    db_host: str = typer.Option("localhost", "--db-host", help="Postgres host"),
    db_port: int = typer.Option(5432, "--db-port", help="Postgres port"),
    db_name: str = typer.Option("postgres", "--db-name", help="Database name"),
    db_user: str = typer.Option("postgres", "--db-user", help="Database user"),
    db_sslmode: Optional[str] = typer.Option(None, "--db-sslmode", help="libpq sslmode, e.g. require"),
    enable_reliefweb: bool = typer.Option(
        False,
        "--reliefweb/--no-reliefweb",
        help="Fetch the ReliefWeb epidemic feed as well as WHO",
    ),
) -> None:
    """Initialize PulseMap configuration and database."""
    console.print(Panel.fit("🌍 PulseMap - Initialization", style="bold blue"))

    # Create default configuration
    config = ConfigModel(
        postgres={
            "host": db_host,
            "port": db_port,
            "database": db_name,
            "user": db_user,
            "password_env": "PULSEMAP_DB_PASSWORD",
            "sslmode": db_sslmode,
        },
        reliefweb={"enabled": enable_reliefweb},
    )

    # Save configuration
    save_config(config, config_path)
    console.print(f"✅ Created config: {config_path}")

    # Validate database connection
    console.print("\n[bold]Testing database connection...[/bold]")
    db_config = Config(config_path).get_db_config()

    if not validate_connection(db_config):
        console.print(
            "[red]❌ Database connection failed![/red]\n"
            "Please ensure Postgres is running and credentials are correct.\n"
            f"Set the password via environment variable: [bold]export PULSEMAP_DB_PASSWORD=your_password[/bold]"
        )
        raise typer.Exit(1)

    console.print("✅ Database connection successful")

    # Initialize database schema
    console.print("\n[bold]Initializing database schema...[/bold]")
    try:
        init_database(db_config)
        console.print("✅ Database schema initialized")
    except Exception as e:
        console.print(f"[red]❌ Failed to initialize database: {e}[/red]")
        raise typer.Exit(1)

    # Success message
    console.print(
        Panel(
            f"[green]✅ PulseMap initialized successfully![/green]\n\n"
            f"Configuration: {config_path}\n\n"
            f"Next steps:\n"
            f"1. Set database password: [bold]export PULSEMAP_DB_PASSWORD=your_password[/bold]\n"
            f"2. Set geocoding token: [bold]export MAPBOX_TOKEN=your_token[/bold]\n"
            f"3. Run: [bold]pulsemap run[/bold]",
            style="green",
        )
    )
