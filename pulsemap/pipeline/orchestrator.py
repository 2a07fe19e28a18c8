"""Pipeline orchestrator that runs the outbreak update and backfill pipelines."""

import asyncio
import time
from typing import Callable, Dict, List, Optional

import pendulum
from psycopg import Connection
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from ..config import Config
from ..db import PostgresOutbreakStore, RunManager, get_connection
from ..geocoding import Geocoder
from ..ingestion import (
    BaseFetcher,
    RawReport,
    ReliefWebFetcher,
    WHOFetcher,
    fetch_all_sources_sync,
    print_fetch_summary,
)
from .dedup import ReportMerger
from .models import BackfillRequest, ProcessResult, RunSummary

console = Console()


class PipelineStage:
    """Represents a pipeline stage."""

    def __init__(self, name: str, description: str):
        self.name = name
        self.description = description
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.success = False
        self.error: Optional[str] = None
        self.stats: Dict = {}

    def start(self):
        """Mark stage as started."""
        self.start_time = time.time()

    def complete(self, stats: Optional[Dict] = None):
        """Mark stage as completed successfully."""
        self.end_time = time.time()
        self.success = True
        if stats:
            self.stats.update(stats)

    def fail(self, error: str):
        """Mark stage as failed."""
        self.end_time = time.time()
        self.success = False
        self.error = error

    @property
    def duration(self) -> float:
        """Get stage duration in seconds."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


class PipelineOrchestrator:
    """Orchestrates fetching bulletins and merging them into storage."""

    def __init__(self, config: Config):
        """Initialize pipeline orchestrator."""
        self.config = config
        self.stages: List[PipelineStage] = []
        self.run_id: Optional[int] = None
        self.total_start_time: Optional[float] = None

    def build_fetchers(self) -> List[BaseFetcher]:
        """Enabled sources in merge order."""
        settings = self.config.config
        fetchers: List[BaseFetcher] = []
        if settings.who.enabled:
            fetchers.append(WHOFetcher(settings.who))
        fetchers.append(ReliefWebFetcher(settings.reliefweb))
        return fetchers

    def build_geocoder(self) -> Geocoder:
        """Geocoder with the configured Mapbox token."""
        return Geocoder(self.config.config.geocoder, self.config.get_mapbox_token())

    def _reset(self) -> None:
        self.stages = [
            PipelineStage("fetch", "Fetching outbreak bulletins"),
            PipelineStage("merge", "Deduplicating and storing reports"),
        ]
        self.run_id = None
        self.total_start_time = time.time()

    def _elapsed(self) -> float:
        return time.time() - self.total_start_time if self.total_start_time else 0.0

    def _print_summary(self, summary: RunSummary):
        """Print pipeline execution summary."""
        table = Table(title="Pipeline Summary")
        table.add_column("Stage", style="cyan")
        table.add_column("Status", style="bold")
        table.add_column("Duration", style="yellow")
        table.add_column("Details", style="dim")

        for stage in self.stages:
            status = "[green]✓[/green]" if stage.success else "[red]✗[/red]"
            duration = f"{stage.duration:.1f}s" if stage.duration > 0 else "-"

            details = ""
            if stage.success and stage.stats:
                if stage.name == "fetch":
                    details = f"{stage.stats.get('total_reports', 0)} reports from {stage.stats.get('sources', 0)} sources"
                elif stage.name == "merge":
                    details = (
                        f"{stage.stats.get('new_outbreaks', 0)} outbreaks, "
                        f"{stage.stats.get('new_locations', 0)} locations, "
                        f"{stage.stats.get('new_reports', 0)} reports, "
                        f"{stage.stats.get('skipped_duplicates', 0)} skipped"
                    )
            elif not stage.success:
                details = stage.error or "Not run"

            table.add_row(stage.name.title(), status, duration, details)

        console.print("\n")
        console.print(table)

        if summary.success:
            console.print(Panel(
                f"[green]✅ Pipeline completed successfully![/green]\n\n"
                f"Kind: {summary.kind}\n"
                f"Duration: {summary.duration:.1f} seconds\n"
                f"Fetched: {summary.fetched} reports\n"
                f"New outbreaks: {summary.results.new_outbreaks}\n"
                f"New locations: {summary.results.new_locations}\n"
                f"New reports: {summary.results.new_reports}\n"
                f"Skipped duplicates: {summary.results.skipped_duplicates}",
                style="green"
            ))
        else:
            console.print(Panel(
                f"[red]❌ Pipeline failed![/red]\n\n"
                f"Error: {summary.error}\n"
                f"Duration: {summary.duration:.1f} seconds",
                style="red"
            ))

    def run(self) -> RunSummary:
        """Fetch the latest bulletins from every enabled source and merge them."""
        self._reset()
        console.print(Panel.fit("🌍 PulseMap - Outbreak Update", style="bold blue"))

        def fetch(stage: PipelineStage) -> Dict[str, List[RawReport]]:
            fetchers = self.build_fetchers()
            results = fetch_all_sources_sync(fetchers)
            print_fetch_summary(results)
            stage.complete({
                "sources": len(results),
                "successful_sources": sum(1 for r in results if r.success),
                "total_reports": sum(r.report_count for r in results),
            })
            return {r.source_name.lower(): r.reports for r in results}

        return self._execute("update", fetch)

    def backfill(self, request: BackfillRequest) -> RunSummary:
        """Fetch WHO bulletins for a date range and merge them."""
        self._reset()
        console.print(Panel.fit(
            f"🌍 PulseMap - Backfill\n"
            f"{request.source} from {request.start_date} to {request.end_date} (limit {request.limit})",
            style="bold blue"
        ))

        def fetch(stage: PipelineStage) -> Dict[str, List[RawReport]]:
            fetcher = WHOFetcher(self.config.config.who)
            reports = asyncio.run(
                fetcher.fetch_by_date_range(request.start_date, request.end_date, request.limit)
            )
            stage.complete({"sources": 1, "total_reports": len(reports)})
            return {"who": reports}

        return self._execute("backfill", fetch)

    def _execute(
        self,
        kind: str,
        fetch: Callable[[PipelineStage], Dict[str, List[RawReport]]],
    ) -> RunSummary:
        """Run the fetch and merge stages inside one recorded pipeline run."""
        summary = RunSummary(success=False, kind=kind, timestamp=pendulum.now("UTC"))
        db_config = self.config.get_db_config()

        try:
            with get_connection(db_config) as conn:
                run_manager = RunManager()
                self.run_id = run_manager.create_run(conn, kind)

                self._execute_stages(conn, fetch, summary)

                summary.duration = self._elapsed()
                run_manager.update_run_status(
                    conn,
                    self.run_id,
                    "success" if summary.success else "failed",
                    {
                        "duration": summary.duration,
                        "sources": summary.sources,
                        "results": summary.results.model_dump(),
                        "error": summary.error,
                        "stages": {s.name: s.success for s in self.stages},
                    },
                )
        except Exception as e:
            console.print(f"[red]Database error: {e}[/red]")
            summary.success = False
            summary.error = summary.error or str(e)
        finally:
            summary.duration = self._elapsed()
            summary.timestamp = pendulum.now("UTC")
            self._print_summary(summary)

        return summary

    def _execute_stages(
        self,
        conn: Connection,
        fetch: Callable[[PipelineStage], Dict[str, List[RawReport]]],
        summary: RunSummary,
    ) -> None:
        """Execute the pipeline stages, recording the outcome on summary."""
        reports: List[RawReport] = []

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
        ) as progress:

            # Stage 1: Fetch bulletins
            stage = self.stages[0]
            task = progress.add_task(stage.description, total=1)
            stage.start()

            try:
                by_source = fetch(stage)
                summary.sources = {name: len(items) for name, items in by_source.items()}
                for items in by_source.values():
                    reports.extend(items)
                summary.fetched = len(reports)
                progress.advance(task, 1)

            except Exception as e:
                stage.fail(str(e))
                summary.error = str(e)
                return

            # Stage 2: Merge into storage
            stage = self.stages[1]
            progress.remove_task(task)
            task = progress.add_task(stage.description, total=1)
            stage.start()

            try:
                merger = ReportMerger(PostgresOutbreakStore(conn), self.build_geocoder())
                result: ProcessResult = merger.process(reports)

                summary.results = result
                stage.complete(result.model_dump())
                progress.advance(task, 1)

            except Exception as e:
                stage.fail(str(e))
                summary.error = str(e)
                return

        summary.success = all(stage.success for stage in self.stages)
