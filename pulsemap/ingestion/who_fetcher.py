"""WHO Disease Outbreak News fetcher."""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

import httpx
import pendulum
from rich.console import Console

from ..classification import (
    estimate_severity,
    extract_country,
    extract_disease,
    is_global_country,
    truncate_summary,
)
from ..config import WHOConfig
from ..exceptions import FetchError
from ..models import SourceType
from .base import BaseFetcher
from .models import RawReport

console = Console()

DON_FIELDS = "DonId,Title,PublicationDate,Summary,UrlName"


def parse_don_items(items: List[Dict[str, Any]], item_url_base: str) -> List[RawReport]:
    """Classify DON API items into raw reports, dropping global bulletins."""
    reports = []
    for item in items:
        title = item.get("Title") or ""
        summary = item.get("Summary") or ""

        country = extract_country(title)
        if is_global_country(country):
            continue

        try:
            published_at = pendulum.parse(item.get("PublicationDate") or "")
        except (ValueError, TypeError):
            published_at = None
        # Durations and intervals are not publication timestamps
        if not isinstance(published_at, datetime):
            console.print(f"[yellow]WHO: Skipping '{title}' (bad PublicationDate)[/yellow]")
            continue

        reports.append(
            RawReport(
                disease_name=extract_disease(title),
                country=country,
                region=None,
                title=title,
                summary=truncate_summary(summary),
                url=f"{item_url_base}{item.get('UrlName') or ''}",
                source_type=SourceType.WHO,
                source_name="WHO",
                published_at=published_at,
                severity_hint=estimate_severity(title, summary),
                case_count=None,
            )
        )
    return reports


class WHOFetcher(BaseFetcher):
    """Fetch bulletins from the WHO DON API."""

    source_name = "WHO"

    def __init__(
        self,
        config: Optional[WHOConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize WHO fetcher."""
        self.config = config or WHOConfig()
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.config.timeout,
            headers={"User-Agent": self.config.user_agent},
            transport=self.transport,
        )

    async def _get_items(self, params: Dict[str, str]) -> List[Dict[str, Any]]:
        async with self._client() as client:
            response = await client.get(self.config.base_url, params=params)
            response.raise_for_status()
            return response.json().get("value") or []

    async def fetch_reports(self) -> List[RawReport]:
        """Fetch the latest bulletins."""
        items = await self._get_items(
            {
                "$orderby": "PublicationDate desc",
                "$top": str(self.config.top),
                "$select": DON_FIELDS,
            }
        )
        reports = parse_don_items(items, self.config.item_url_base)
        console.print(f"[dim]WHO: Parsed {len(reports)} outbreak reports from {len(items)} DON items[/dim]")
        return reports

    async def fetch_by_date_range(
        self,
        start_date: date,
        end_date: date,
        limit: int,
    ) -> List[RawReport]:
        """
        Fetch bulletins published between two dates, inclusive.

        Raises:
            FetchError: if the API cannot be reached or answers with an error
        """
        params = {
            "$filter": (
                f"PublicationDate ge {start_date.isoformat()}T00:00:00Z "
                f"and PublicationDate le {end_date.isoformat()}T23:59:59Z"
            ),
            "$orderby": "PublicationDate desc",
            "$top": str(limit),
            "$select": DON_FIELDS,
        }
        try:
            items = await self._get_items(params)
        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"WHO API returned {e.response.status_code}: {e.response.reason_phrase}"
            ) from e
        except httpx.HTTPError as e:
            raise FetchError(f"WHO API request failed: {e}") from e
        except ValueError as e:
            raise FetchError(f"WHO API returned invalid JSON: {e}") from e

        return parse_don_items(items, self.config.item_url_base)
