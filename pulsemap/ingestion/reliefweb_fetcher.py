"""ReliefWeb epidemic feed fetcher."""

import calendar
import re
from datetime import datetime, timezone
from typing import List, Optional

import feedparser
import httpx
import pendulum
from rich.console import Console

from ..classification import (
    UNKNOWN_COUNTRY,
    estimate_severity,
    extract_disease,
    truncate_summary,
)
from ..config import ReliefWebConfig
from ..exceptions import FetchError
from ..models import SourceType
from .base import BaseFetcher
from .models import RawReport

console = Console()

_TAG = re.compile(r"<[^>]+>")
_WHITESPACE = re.compile(r"\s+")


def extract_reliefweb_country(title: str) -> str:
    """ReliefWeb disaster titles read "Country: Event - Mon YYYY"."""
    country, sep, _ = title.partition(":")
    country = country.strip()
    if not sep or not country:
        return UNKNOWN_COUNTRY
    return country


def strip_html(text: str) -> str:
    """Drop tags and collapse whitespace."""
    return _WHITESPACE.sub(" ", _TAG.sub(" ", text)).strip()


def _entry_published(entry) -> Optional[datetime]:
    parsed = entry.get("published_parsed") or entry.get("updated_parsed")
    if not parsed:
        return None
    # feedparser normalizes to UTC struct_time
    return datetime.fromtimestamp(calendar.timegm(parsed), tz=timezone.utc)


class ReliefWebFetcher(BaseFetcher):
    """Fetch epidemic disasters from a ReliefWeb RSS feed."""

    source_name = "ReliefWeb"

    def __init__(
        self,
        config: Optional[ReliefWebConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize ReliefWeb fetcher."""
        self.config = config or ReliefWebConfig()
        self.transport = transport

    async def fetch_reports(self) -> List[RawReport]:
        """Fetch and classify feed entries. Returns nothing while disabled."""
        if not self.config.enabled:
            console.print("[dim]ReliefWeb: Skipped (disabled in config). WHO API is the primary source.[/dim]")
            return []

        async with httpx.AsyncClient(
            timeout=self.config.timeout,
            headers={"User-Agent": self.config.user_agent},
            follow_redirects=True,
            transport=self.transport,
        ) as client:
            response = await client.get(self.config.feed_url)
            response.raise_for_status()

        feed = feedparser.parse(response.text)
        if feed.bozo and not feed.entries:
            raise FetchError(f"Invalid RSS feed: {feed.bozo_exception}")

        reports = []
        for entry in feed.entries:
            title = entry.get("title", "").strip()
            country = extract_reliefweb_country(title)
            summary = strip_html(entry.get("summary", ""))

            reports.append(
                RawReport(
                    disease_name=extract_disease(title),
                    country=country,
                    region=None,
                    title=title,
                    summary=truncate_summary(summary),
                    url=entry.get("link"),
                    source_type=SourceType.NEWS,
                    source_name=self.source_name,
                    published_at=_entry_published(entry) or pendulum.now("UTC"),
                    severity_hint=estimate_severity(title, summary),
                    case_count=None,
                )
            )

        console.print(f"[dim]ReliefWeb: Parsed {len(reports)} reports[/dim]")
        return reports
