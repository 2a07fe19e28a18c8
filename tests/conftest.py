"""Shared fakes for merge engine tests: in-memory store and static geocoder."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set, Tuple

import pytest

from pulsemap.db.base import OutbreakStore, WriteResult
from pulsemap.exceptions import StorageConnectionError, StorageError, StorageReadError
from pulsemap.geocoding import BaseGeocoder, Coordinates
from pulsemap.ingestion.models import RawReport
from pulsemap.models import Outbreak, OutbreakLocation, Report, Severity, SourceType


class InMemoryOutbreakStore(OutbreakStore):
    """OutbreakStore kept in dicts, with switches to simulate failures."""

    def __init__(self) -> None:
        self.outbreaks: Dict[str, Outbreak] = {}
        self.locations: Dict[str, OutbreakLocation] = {}
        self.reports: Dict[str, Report] = {}
        self.severity_updates: List[Tuple[str, Severity, datetime]] = []
        self.fail_reads = False
        self.fail_outbreak_for: Set[str] = set()
        self.fail_location = False
        self.fail_report_titles: Set[str] = set()
        self.fail_severity_update = False
        self.fail_find_location = False
        # Writes and lookups raise StorageConnectionError once this many writes succeeded
        self.lose_connection_after_writes: Optional[int] = None
        self.writes = 0
        self.calls = 0

    def _new_id(self) -> str:
        return str(uuid.uuid4())

    def _check_connection(self) -> None:
        self.calls += 1
        limit = self.lose_connection_after_writes
        if limit is not None and self.writes >= limit:
            raise StorageConnectionError("connection lost")

    def _written(self, result: WriteResult) -> WriteResult:
        if result.success:
            self.writes += 1
        return result

    def add_outbreak(self, disease_name: str, severity: Severity = Severity.MODERATE) -> str:
        outbreak_id = self._new_id()
        self.outbreaks[outbreak_id] = Outbreak(
            id=outbreak_id, disease_name=disease_name, severity=severity
        )
        return outbreak_id

    def add_report_title(self, outbreak_id: str, title: str) -> None:
        report_id = self._new_id()
        self.reports[report_id] = Report(
            id=report_id,
            outbreak_id=outbreak_id,
            source_type=SourceType.WHO,
            source_name="WHO",
            title=title,
            published_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )

    def list_outbreaks(self) -> List[Outbreak]:
        self.calls += 1
        if self.fail_reads:
            raise StorageReadError("connection refused")
        return list(self.outbreaks.values())

    def list_report_titles(self) -> List[str]:
        self.calls += 1
        if self.fail_reads:
            raise StorageReadError("connection refused")
        return [r.title for r in self.reports.values()]

    def create_outbreak(self, outbreak: Outbreak) -> WriteResult:
        self._check_connection()
        if outbreak.disease_name in self.fail_outbreak_for:
            return WriteResult.failed("insert failed")
        outbreak_id = self._new_id()
        self.outbreaks[outbreak_id] = outbreak.model_copy(update={"id": outbreak_id})
        return self._written(WriteResult.ok(outbreak_id))

    def update_outbreak_severity(
        self, outbreak_id: str, severity: Severity, updated_at: datetime
    ) -> WriteResult:
        self._check_connection()
        if self.fail_severity_update:
            return WriteResult.failed("update failed")
        outbreak = self.outbreaks[outbreak_id]
        self.outbreaks[outbreak_id] = outbreak.model_copy(
            update={"severity": severity, "last_updated": updated_at}
        )
        self.severity_updates.append((outbreak_id, severity, updated_at))
        return self._written(WriteResult.ok())

    def find_location(self, outbreak_id: str, country: str) -> Optional[str]:
        self._check_connection()
        if self.fail_find_location:
            raise StorageError("lookup failed")
        for location_id, location in self.locations.items():
            if location.outbreak_id == outbreak_id and location.country == country:
                return location_id
        return None

    def create_location(self, location: OutbreakLocation) -> WriteResult:
        self._check_connection()
        if self.fail_location:
            return WriteResult.failed("insert failed")
        location_id = self._new_id()
        self.locations[location_id] = location.model_copy(update={"id": location_id})
        return self._written(WriteResult.ok(location_id))

    def create_report(self, report: Report) -> WriteResult:
        self._check_connection()
        if report.title in self.fail_report_titles:
            return WriteResult.failed("insert failed")
        report_id = self._new_id()
        self.reports[report_id] = report.model_copy(update={"id": report_id})
        return self._written(WriteResult.ok(report_id))

    def outbreak_by_disease(self, disease_name: str) -> Outbreak:
        matches = [o for o in self.outbreaks.values() if o.disease_name == disease_name]
        assert len(matches) == 1, f"expected one {disease_name} outbreak, got {len(matches)}"
        return matches[0]


class StaticGeocoder(BaseGeocoder):
    """Geocoder answering from a fixed table and recording lookups."""

    def __init__(self, known: Optional[Dict[str, Coordinates]] = None) -> None:
        self.known = known if known is not None else {
            "Sudan": Coordinates(latitude=15.5, longitude=32.53),
            "Peru": Coordinates(latitude=-12.05, longitude=-77.04),
            "Kenya": Coordinates(latitude=-1.29, longitude=36.82),
        }
        self.lookups: List[Tuple[str, Optional[str]]] = []

    def geocode(self, country: str, region: Optional[str] = None) -> Optional[Coordinates]:
        self.lookups.append((country, region))
        return self.known.get(country)


@pytest.fixture
def store() -> InMemoryOutbreakStore:
    return InMemoryOutbreakStore()


@pytest.fixture
def geocoder() -> StaticGeocoder:
    return StaticGeocoder()


def make_report(
    title: str = "Cholera - Sudan",
    disease_name: str = "Cholera",
    country: str = "Sudan",
    severity_hint: Optional[Severity] = Severity.SEVERE,
    **overrides,
) -> RawReport:
    """Build a RawReport with sensible WHO defaults."""
    fields = dict(
        disease_name=disease_name,
        country=country,
        region=None,
        title=title,
        summary="Cases reported in several states.",
        url="https://www.who.int/emergencies/disease-outbreak-news/item/2024-DON500",
        source_type=SourceType.WHO,
        source_name="WHO",
        published_at=datetime(2024, 5, 10, 12, 0, tzinfo=timezone.utc),
        severity_hint=severity_hint,
        case_count=None,
    )
    fields.update(overrides)
    return RawReport(**fields)
