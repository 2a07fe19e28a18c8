"""Sources inspection commands."""

from pathlib import Path
from typing import List, Optional, Tuple

import httpx
import typer
from rich.console import Console
from rich.table import Table

from ..config import Config, ConfigModel

console = Console()
sources_app = typer.Typer(help="Inspect bulletin sources")

ConfigOption = typer.Option(
    None,
    "--config",
    "-c",
    help="Path to config.yaml. Default: ~/.config/pulsemap/config.yaml",
)


def configured_sources(settings: ConfigModel) -> List[Tuple[str, str, bool]]:
    """(name, url, enabled) for every known source."""
    return [
        ("WHO", settings.who.base_url, settings.who.enabled),
        ("ReliefWeb", settings.reliefweb.feed_url, settings.reliefweb.enabled),
    ]


def _load(config_path: Optional[Path]) -> ConfigModel:
    try:
        return Config(config_path).config
    except FileNotFoundError:
        console.print("[red]Config file not found. Run 'pulsemap init' first.[/red]")
        raise typer.Exit(1)


@sources_app.command("list")
def sources_list(config_path: Optional[Path] = ConfigOption) -> None:
    """List configured sources."""
    settings = _load(config_path)

    table = Table(title="Configured Sources")
    table.add_column("Name", style="cyan")
    table.add_column("Enabled", style="yellow")
    table.add_column("URL", style="blue")

    for name, url, enabled in configured_sources(settings):
        table.add_row(name, "✓" if enabled else "✗", url)

    console.print(table)


@sources_app.command("test")
def sources_test(
    name: Optional[str] = typer.Argument(None, help="Source name to test (or test all)"),
    config_path: Optional[Path] = ConfigOption,
) -> None:
    """Test source connectivity."""
    settings = _load(config_path)
    sources = configured_sources(settings)

    # Filter sources if name provided
    if name:
        sources = [s for s in sources if s[0].lower() == name.lower()]
        if not sources:
            console.print(f"[red]Source '{name}' not found.[/red]")
            raise typer.Exit(1)

    # Test each source
    with httpx.Client(timeout=10.0, follow_redirects=True) as client:
        for source_name, url, enabled in sources:
            if not enabled:
                console.print(f"[yellow]⚠️  {source_name}: Disabled[/yellow]")
                continue

            try:
                response = client.get(url)
                response.raise_for_status()
                console.print(f"[green]✅ {source_name}: OK ({response.status_code})[/green]")
            except httpx.HTTPError as e:
                console.print(f"[red]❌ {source_name}: Failed - {e}[/red]")
