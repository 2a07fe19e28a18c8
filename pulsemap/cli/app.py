"""Main CLI application."""

import typer
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()

from .backfill import backfill_command
from .init import init_command
from .run import run_command
from .runs import runs_command
from .sources import sources_app

app = typer.Typer(
    name="pulsemap",
    help="PulseMap - Disease outbreak bulletin ingestion",
    no_args_is_help=True,
)

# Register commands
app.command("init")(init_command)
app.command("run")(run_command)
app.command("backfill")(backfill_command)
app.command("runs")(runs_command)
app.add_typer(sources_app, name="sources", help="Inspect bulletin sources")


if __name__ == "__main__":
    app()
