"""Fetcher base class and concurrent source fan-out."""

import asyncio
from abc import ABC, abstractmethod
from typing import List, Sequence

import httpx
from rich.console import Console

from .models import FetchResult, RawReport

console = Console()


class BaseFetcher(ABC):
    """Base class for bulletin sources."""

    source_name: str = "unknown"

    @abstractmethod
    async def fetch_reports(self) -> List[RawReport]:
        """
        Fetch and classify the latest bulletins.

        May raise on network or parse failures; use fetch() for isolation.
        """
        pass

    async def fetch(self) -> FetchResult:
        """Fetch reports, turning any failure into an unsuccessful result."""
        try:
            reports = await self.fetch_reports()
            return FetchResult(
                source_name=self.source_name,
                success=True,
                reports=reports,
                report_count=len(reports),
            )
        except httpx.HTTPError as e:
            return FetchResult(
                source_name=self.source_name,
                success=False,
                error=f"HTTP error: {e}",
            )
        except Exception as e:
            return FetchResult(
                source_name=self.source_name,
                success=False,
                error=f"Unexpected error: {e}",
            )

    def fetch_sync(self) -> FetchResult:
        """Synchronous wrapper for fetch."""
        return asyncio.run(self.fetch())


async def fetch_all_sources(
    fetchers: Sequence[BaseFetcher],
    max_concurrent: int = 5,
) -> List[FetchResult]:
    """Fetch all sources concurrently. Results keep the order of fetchers."""
    if not fetchers:
        return []

    # Create semaphore for concurrency control
    semaphore = asyncio.Semaphore(max_concurrent)

    async def fetch_with_semaphore(fetcher: BaseFetcher) -> FetchResult:
        async with semaphore:
            return await fetcher.fetch()

    tasks = [fetch_with_semaphore(fetcher) for fetcher in fetchers]
    return list(await asyncio.gather(*tasks))


def fetch_all_sources_sync(
    fetchers: Sequence[BaseFetcher],
    max_concurrent: int = 5,
) -> List[FetchResult]:
    """Synchronous wrapper for fetch_all_sources."""
    return asyncio.run(fetch_all_sources(fetchers, max_concurrent))


def print_fetch_summary(results: Sequence[FetchResult]) -> None:
    """Print summary of source fetch results."""
    total_reports = sum(r.report_count for r in results)
    successful = sum(1 for r in results if r.success)
    failed = len(results) - successful

    console.print(f"\n[bold]Source Fetch Summary:[/bold]")
    console.print(f"  Sources fetched: {len(results)}")
    console.print(f"  Successful: [green]{successful}[/green]")
    console.print(f"  Failed: [red]{failed}[/red]")
    console.print(f"  Total reports: {total_reports}")

    if failed > 0:
        console.print(f"\n[bold red]Failed sources:[/bold red]")
        for result in results:
            if not result.success:
                console.print(f"  - {result.source_name}: {result.error}")
