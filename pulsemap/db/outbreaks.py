"""Postgres storage for outbreaks, locations and reports."""

from datetime import datetime
from typing import Any, List, Optional, Sequence

import psycopg
from psycopg import Connection

from ..exceptions import StorageConnectionError, StorageError, StorageReadError
from ..models import Outbreak, OutbreakLocation, Report, Severity
from .base import OutbreakStore, WriteResult


class PostgresOutbreakStore(OutbreakStore):
    """OutbreakStore backed by a psycopg connection using dict rows."""

    def __init__(self, conn: Connection) -> None:
        """Initialize store."""
        self.conn = conn

    def _check_connection(self, error: psycopg.Error) -> None:
        if self.conn.broken or self.conn.closed:
            raise StorageConnectionError(f"Database connection lost: {error}") from error

    def _fetch_all(self, query: str, params: Sequence[Any] = ()) -> List[dict]:
        try:
            with self.conn.cursor() as cur:
                cur.execute(query, params)
                rows = cur.fetchall()
            self.conn.commit()
            return rows
        except psycopg.Error as e:
            self._check_connection(e)
            self.conn.rollback()
            raise StorageReadError(f"Failed to load existing state: {e}") from e

    def _write(self, query: str, params: Sequence[Any], returning: bool = False) -> WriteResult:
        """Run one write in its own transaction."""
        try:
            with self.conn.cursor() as cur:
                cur.execute(query, params)
                row = cur.fetchone() if returning else None
                if not returning and cur.rowcount == 0:
                    self.conn.rollback()
                    return WriteResult.failed("No rows affected")
            self.conn.commit()
            return WriteResult.ok(row["id"] if row else None)
        except psycopg.Error as e:
            self._check_connection(e)
            self.conn.rollback()
            return WriteResult.failed(str(e))

    def list_outbreaks(self) -> List[Outbreak]:
        """All outbreaks, oldest first."""
        rows = self._fetch_all(
            """
            SELECT id::text AS id, disease_name, severity, status
            FROM outbreaks
            ORDER BY created_at, id
            """
        )
        return [Outbreak(**row) for row in rows]

    def list_report_titles(self) -> List[str]:
        """Titles of all stored reports."""
        rows = self._fetch_all("SELECT title FROM reports")
        return [row["title"] for row in rows]

    def create_outbreak(self, outbreak: Outbreak) -> WriteResult:
        return self._write(
            """
            INSERT INTO outbreaks (
                disease_name, status, severity, first_reported, summary
            ) VALUES (%s, %s, %s, %s, %s)
            RETURNING id::text AS id
            """,
            (
                outbreak.disease_name,
                outbreak.status.value,
                outbreak.severity.value,
                outbreak.first_reported,
                outbreak.summary,
            ),
            returning=True,
        )

    def update_outbreak_severity(
        self,
        outbreak_id: str,
        severity: Severity,
        updated_at: datetime,
    ) -> WriteResult:
        return self._write(
            """
            UPDATE outbreaks
            SET severity = %s, last_updated = %s
            WHERE id = %s
            """,
            (Severity(severity).value, updated_at, outbreak_id),
        )

    def find_location(self, outbreak_id: str, country: str) -> Optional[str]:
        """
        Id of the location for (outbreak, country), if one exists.

        Raises:
            StorageError: if the lookup fails
        """
        try:
            with self.conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT id::text AS id
                    FROM outbreak_locations
                    WHERE outbreak_id = %s AND country = %s
                    LIMIT 1
                    """,
                    (outbreak_id, country),
                )
                row = cur.fetchone()
            self.conn.commit()
        except psycopg.Error as e:
            self._check_connection(e)
            self.conn.rollback()
            raise StorageError(f"Location lookup failed: {e}") from e

        return row["id"] if row else None

    def create_location(self, location: OutbreakLocation) -> WriteResult:
        return self._write(
            """
            INSERT INTO outbreak_locations (
                outbreak_id, latitude, longitude, country, region,
                case_count, severity_score
            ) VALUES (%s, %s, %s, %s, %s, %s, %s)
            RETURNING id::text AS id
            """,
            (
                location.outbreak_id,
                location.latitude,
                location.longitude,
                location.country,
                location.region,
                location.case_count,
                location.severity_score,
            ),
            returning=True,
        )

    def create_report(self, report: Report) -> WriteResult:
        return self._write(
            """
            INSERT INTO reports (
                outbreak_id, source_type, source_name, title, url,
                content, published_at
            ) VALUES (%s, %s, %s, %s, %s, %s, %s)
            RETURNING id::text AS id
            """,
            (
                report.outbreak_id,
                report.source_type.value,
                report.source_name,
                report.title,
                report.url,
                report.content,
                report.published_at,
            ),
            returning=True,
        )
