"""Report deduplication and merge into outbreak storage."""

from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Set

import httpx
import pendulum
from rich.console import Console

from ..classification import (
    DEFAULT_SEVERITY,
    UNKNOWN_COUNTRY,
    UNKNOWN_DISEASE,
    is_escalation,
    normalize_title,
    severity_score,
    truncate_summary,
)
from ..db.base import OutbreakStore
from ..exceptions import GeocodingError, StorageConnectionError, StorageError
from ..geocoding import BaseGeocoder
from ..ingestion.models import RawReport
from ..models import Outbreak, OutbreakLocation, OutbreakStatus, Report
from .models import KnownOutbreak, ProcessResult

console = Console()


def _utc_now() -> datetime:
    return pendulum.now("UTC")


class ReportMerger:
    """
    Merge raw reports into outbreaks, locations and reports.

    Outbreaks are keyed by disease name alone, so the same disease reported
    from two countries becomes one outbreak with two locations. Reports are
    keyed by normalized title across the whole store.

    Reports are handled strictly in input order: later reports see outbreaks
    and titles created by earlier ones in the same call. Running two merges
    against the same store concurrently is not supported.
    """

    def __init__(
        self,
        store: OutbreakStore,
        geocoder: BaseGeocoder,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """Initialize merger."""
        self.store = store
        self.geocoder = geocoder
        self.clock = clock or _utc_now

    def _load_titles(self) -> Set[str]:
        return {normalize_title(title) for title in self.store.list_report_titles()}

    def _load_outbreaks(self) -> Dict[str, KnownOutbreak]:
        outbreak_map: Dict[str, KnownOutbreak] = {}
        for outbreak in self.store.list_outbreaks():
            # First one wins if storage holds several rows for a disease
            if outbreak.disease_name not in outbreak_map:
                outbreak_map[outbreak.disease_name] = KnownOutbreak(
                    id=outbreak.id,
                    severity=outbreak.severity,
                )
        return outbreak_map

    def process(self, reports: Iterable[RawReport]) -> ProcessResult:
        """
        Deduplicate and store a batch of reports.

        Returns:
            Counts of new outbreaks, locations, reports and skipped reports

        Raises:
            StorageReadError: if existing outbreaks or titles cannot be loaded
            StorageConnectionError: if the store becomes unreachable
        """
        reports = list(reports)
        result = ProcessResult()
        if not reports:
            return result

        existing_titles = self._load_titles()
        outbreak_map = self._load_outbreaks()

        for report in reports:
            self._merge_report(report, existing_titles, outbreak_map, result)

        return result

    def _merge_report(
        self,
        report: RawReport,
        existing_titles: Set[str],
        outbreak_map: Dict[str, KnownOutbreak],
        result: ProcessResult,
    ) -> None:
        title_key = normalize_title(report.title)

        if title_key in existing_titles:
            result.skipped_duplicates += 1
            return

        if report.disease_name == UNKNOWN_DISEASE or report.country == UNKNOWN_COUNTRY:
            console.print(f"[dim]Skipping unclassified report: {report.title}[/dim]")
            result.skipped_duplicates += 1
            return

        known = outbreak_map.get(report.disease_name)
        if known is None:
            known = self._create_outbreak(report)
            if known is None:
                return
            outbreak_map[report.disease_name] = known
            result.new_outbreaks += 1
        elif is_escalation(known.severity, report.severity_hint):
            self._escalate(known, report)

        if self._add_location(known.id, report):
            result.new_locations += 1

        if self._add_report(known.id, report):
            result.new_reports += 1
            existing_titles.add(title_key)

    def _create_outbreak(self, report: RawReport) -> Optional[KnownOutbreak]:
        severity = report.severity_hint or DEFAULT_SEVERITY
        write = self.store.create_outbreak(
            Outbreak(
                disease_name=report.disease_name,
                status=OutbreakStatus.ACTIVE,
                severity=severity,
                first_reported=report.published_at,
                summary=truncate_summary(report.summary),
            )
        )
        if not write.success or not write.id:
            console.print(
                f"[red]Failed to create outbreak for {report.disease_name}: {write.error}[/red]"
            )
            return None
        return KnownOutbreak(id=write.id, severity=severity)

    def _escalate(self, known: KnownOutbreak, report: RawReport) -> None:
        write = self.store.update_outbreak_severity(known.id, report.severity_hint, self.clock())
        if not write.success:
            console.print(
                f"[red]Failed to update severity for {report.disease_name}: {write.error}[/red]"
            )
            return
        known.severity = report.severity_hint

    def _add_location(self, outbreak_id: str, report: RawReport) -> bool:
        """Create the (outbreak, country) location if it is new and geocodable."""
        try:
            coords = self.geocoder.geocode(report.country, report.region)
        except (GeocodingError, httpx.HTTPError) as e:
            console.print(f"[dim]Geocoding failed for {report.country}: {e}[/dim]")
            coords = None

        if coords is None:
            return False

        try:
            if self.store.find_location(outbreak_id, report.country) is not None:
                return False
        except StorageConnectionError:
            raise
        except StorageError as e:
            console.print(f"[red]Location lookup failed for {report.country}: {e}[/red]")
            return False

        write = self.store.create_location(
            OutbreakLocation(
                outbreak_id=outbreak_id,
                latitude=coords.latitude,
                longitude=coords.longitude,
                country=report.country,
                region=report.region,
                case_count=report.case_count or 0,
                severity_score=severity_score(report.severity_hint),
            )
        )
        if not write.success:
            console.print(f"[red]Failed to add location {report.country}: {write.error}[/red]")
        return write.success

    def _add_report(self, outbreak_id: str, report: RawReport) -> bool:
        write = self.store.create_report(
            Report(
                outbreak_id=outbreak_id,
                source_type=report.source_type,
                source_name=report.source_name,
                title=report.title,
                url=report.url,
                content=truncate_summary(report.summary),
                published_at=report.published_at,
            )
        )
        if not write.success:
            console.print(f"[red]Failed to insert report '{report.title}': {write.error}[/red]")
        return write.success


def process_reports(
    reports: List[RawReport],
    store: OutbreakStore,
    geocoder: BaseGeocoder,
) -> ProcessResult:
    """Merge a batch of reports with a fresh ReportMerger."""
    return ReportMerger(store, geocoder).process(reports)
