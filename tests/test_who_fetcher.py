"""
Tests for the WHO DON fetcher and the concurrent fetch helpers.

HTTP is served by httpx.MockTransport, no network access is needed.
"""

from __future__ import annotations

import asyncio
from datetime import date
from typing import List

import httpx
import pytest

from pulsemap.config import WHOConfig
from pulsemap.exceptions import FetchError
from pulsemap.ingestion import (
    BaseFetcher,
    RawReport,
    WHOFetcher,
    fetch_all_sources,
    fetch_all_sources_sync,
    parse_don_items,
)
from pulsemap.models import Severity, SourceType

ITEM_BASE = "https://www.who.int/emergencies/disease-outbreak-news/item/"

DON_ITEMS = [
    {
        "DonId": "2024-DON512",
        "Title": "Cholera - Sudan",
        "PublicationDate": "2024-05-10T12:00:00Z",
        "Summary": "Risk is high, outbreak declared in several states.",
        "UrlName": "2024-DON512",
    },
    {
        "DonId": "2024-DON511",
        "Title": "Mpox - Global",
        "PublicationDate": "2024-05-09T09:00:00Z",
        "Summary": "Multi-country outbreak of mpox.",
        "UrlName": "2024-DON511",
    },
    {
        "DonId": "2024-DON510",
        "Title": "Dengue – Bangladesh (update)",
        "PublicationDate": "2024-05-08T00:00:00Z",
        "Summary": None,
        "UrlName": "2024-DON510",
    },
]


def json_transport(payload, status_code: int = 200, seen: List[httpx.Request] = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=payload)

    return httpx.MockTransport(handler)


def test_parse_don_items_classifies_and_drops_global() -> None:
    """Items are classified; global bulletins are dropped."""
    reports = parse_don_items(DON_ITEMS, ITEM_BASE)

    assert [r.title for r in reports] == ["Cholera - Sudan", "Dengue – Bangladesh (update)"]

    cholera, dengue = reports
    assert cholera.disease_name == "Cholera"
    assert cholera.country == "Sudan"
    assert cholera.region is None
    assert cholera.severity_hint == Severity.CRITICAL
    assert cholera.source_type == SourceType.WHO
    assert cholera.source_name == "WHO"
    assert cholera.url == ITEM_BASE + "2024-DON512"
    assert cholera.case_count is None
    assert (cholera.published_at.year, cholera.published_at.month, cholera.published_at.day) == (2024, 5, 10)

    assert dengue.country == "Bangladesh"
    assert dengue.summary == ""
    assert dengue.severity_hint == Severity.LOW


def test_parse_don_items_truncates_summary() -> None:
    """Summaries are cut at 500 characters."""
    item = dict(DON_ITEMS[0], Summary="x" * 800)

    (report,) = parse_don_items([item], ITEM_BASE)

    assert len(report.summary) == 500


def test_parse_don_items_skips_unparseable_dates() -> None:
    """Items with a missing or broken PublicationDate are skipped."""
    items = [
        dict(DON_ITEMS[0], PublicationDate="not a date"),
        dict(DON_ITEMS[0], PublicationDate=None, Title="Cholera - Peru"),
        dict(DON_ITEMS[0], Title="Cholera - Kenya"),
    ]

    reports = parse_don_items(items, ITEM_BASE)

    assert [r.title for r in reports] == ["Cholera - Kenya"]


@pytest.mark.parametrize("value", ["P1D", "P2W", "2024-01-01T00:00:00Z/P1D"])
def test_parse_don_items_skips_non_timestamp_dates(value: str) -> None:
    """Durations and intervals skip only that item."""
    items = [
        dict(DON_ITEMS[0], PublicationDate=value),
        dict(DON_ITEMS[0], Title="Cholera - Kenya"),
    ]

    reports = parse_don_items(items, ITEM_BASE)

    assert [r.title for r in reports] == ["Cholera - Kenya"]


def test_parse_don_items_keeps_unknown_classifications() -> None:
    """Unclassified items are kept; the merge step skips them."""
    item = dict(DON_ITEMS[0], Title="Acute illness of unknown origin")

    (report,) = parse_don_items([item], ITEM_BASE)

    assert report.disease_name == "Unknown Disease"
    assert report.country == "Unknown"


def test_fetch_reports_sends_latest_query() -> None:
    """The latest-bulletins query orders by date and caps the count."""
    seen: List[httpx.Request] = []
    fetcher = WHOFetcher(WHOConfig(top=25), transport=json_transport({"value": DON_ITEMS}, seen=seen))

    reports = asyncio.run(fetcher.fetch_reports())

    assert len(reports) == 2
    (request,) = seen
    assert request.url.params["$orderby"] == "PublicationDate desc"
    assert request.url.params["$top"] == "25"
    assert request.url.params["$select"] == "DonId,Title,PublicationDate,Summary,UrlName"
    assert "$filter" not in request.url.params
    assert request.headers["User-Agent"] == "PulseMap/1.0 (health-surveillance-dashboard)"


def test_fetch_handles_missing_value_list() -> None:
    """A payload without a value list yields no reports."""
    fetcher = WHOFetcher(transport=json_transport({}))

    result = fetcher.fetch_sync()

    assert result.success
    assert result.reports == []
    assert result.report_count == 0


def test_fetch_isolates_http_failures() -> None:
    """A 503 becomes an unsuccessful FetchResult instead of raising."""
    fetcher = WHOFetcher(transport=json_transport({"error": "down"}, status_code=503))

    result = fetcher.fetch_sync()

    assert not result.success
    assert result.source_name == "WHO"
    assert result.reports == []
    assert "HTTP error" in result.error


def test_fetch_by_date_range_builds_filter() -> None:
    """Date-range queries filter inclusively on PublicationDate."""
    seen: List[httpx.Request] = []
    fetcher = WHOFetcher(transport=json_transport({"value": DON_ITEMS[:1]}, seen=seen))

    reports = asyncio.run(fetcher.fetch_by_date_range(date(2024, 1, 1), date(2024, 3, 31), 200))

    assert [r.title for r in reports] == ["Cholera - Sudan"]
    params = seen[0].url.params
    assert params["$filter"] == (
        "PublicationDate ge 2024-01-01T00:00:00Z and PublicationDate le 2024-03-31T23:59:59Z"
    )
    assert params["$top"] == "200"


def test_fetch_by_date_range_raises_on_error_status() -> None:
    """HTTP errors surface as FetchError with the status code."""
    fetcher = WHOFetcher(transport=json_transport({}, status_code=500))

    with pytest.raises(FetchError, match="500"):
        asyncio.run(fetcher.fetch_by_date_range(date(2024, 1, 1), date(2024, 1, 2), 10))


def test_fetch_by_date_range_raises_on_invalid_json() -> None:
    """A non-JSON body surfaces as FetchError."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>maintenance</html>")

    fetcher = WHOFetcher(transport=httpx.MockTransport(handler))

    with pytest.raises(FetchError):
        asyncio.run(fetcher.fetch_by_date_range(date(2024, 1, 1), date(2024, 1, 2), 10))


class _StaticFetcher(BaseFetcher):
    def __init__(self, name: str, reports: List[RawReport], delay: float = 0.0) -> None:
        self.source_name = name
        self.reports = reports
        self.delay = delay

    async def fetch_reports(self) -> List[RawReport]:
        await asyncio.sleep(self.delay)
        return self.reports


class _BrokenFetcher(BaseFetcher):
    source_name = "Broken"

    async def fetch_reports(self) -> List[RawReport]:
        raise RuntimeError("parser exploded")


def test_fetch_all_sources_keeps_fetcher_order() -> None:
    """Results follow the fetcher order, whatever finishes first."""
    reports = parse_don_items(DON_ITEMS, ITEM_BASE)
    fetchers = [
        _StaticFetcher("Slow", reports[:1], delay=0.05),
        _BrokenFetcher(),
        _StaticFetcher("Fast", reports[1:]),
    ]

    results = asyncio.run(fetch_all_sources(fetchers, max_concurrent=2))

    assert [r.source_name for r in results] == ["Slow", "Broken", "Fast"]
    assert [r.success for r in results] == [True, False, True]
    assert results[1].error == "Unexpected error: parser exploded"
    assert results[0].reports == reports[:1]


def test_fetch_all_sources_sync_empty() -> None:
    """No fetchers means no results."""
    assert fetch_all_sources_sync([]) == []

