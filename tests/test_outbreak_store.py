"""
Tests for PostgresOutbreakStore transaction handling.

A fake psycopg connection records commits and rollbacks; no database needed.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Optional

import psycopg
import pytest

from pulsemap.db import PostgresOutbreakStore
from pulsemap.exceptions import StorageConnectionError, StorageError, StorageReadError
from pulsemap.models import Report, Severity, SourceType


class FakeCursor:
    def __init__(self, conn: "FakeConnection") -> None:
        self.conn = conn
        self.rowcount = -1

    def __enter__(self) -> "FakeCursor":
        return self

    def __exit__(self, *exc: Any) -> None:
        return None

    def execute(self, query: str, params: Any = ()) -> None:
        self.conn.queries.append((query, params))
        if self.conn.error is not None:
            raise self.conn.error
        self.rowcount = self.conn.rowcount

    def fetchone(self) -> Optional[dict]:
        return self.conn.rows[0] if self.conn.rows else None

    def fetchall(self) -> List[dict]:
        return list(self.conn.rows)


class FakeConnection:
    """Just enough of psycopg.Connection for the store."""

    def __init__(self, rows: Optional[List[dict]] = None, rowcount: int = 1) -> None:
        self.rows = rows or []
        self.rowcount = rowcount
        self.error: Optional[Exception] = None
        self.broken = False
        self.closed = False
        self.commits = 0
        self.rollbacks = 0
        self.queries: List[tuple] = []

    def cursor(self) -> FakeCursor:
        return FakeCursor(self)

    def commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        self.rollbacks += 1


def make_stored_report() -> Report:
    return Report(
        outbreak_id="9b2f4c1e-0000-4000-8000-000000000001",
        source_type=SourceType.WHO,
        source_name="WHO",
        title="Cholera - Sudan",
        published_at=datetime(2024, 5, 10, tzinfo=timezone.utc),
    )


def test_insert_commits_and_returns_id() -> None:
    """A successful insert commits once and reports the new id."""
    conn = FakeConnection(rows=[{"id": "c0ffee00-0000-4000-8000-000000000002"}])

    result = PostgresOutbreakStore(conn).create_report(make_stored_report())

    assert result.success
    assert result.id == "c0ffee00-0000-4000-8000-000000000002"
    assert (conn.commits, conn.rollbacks) == (1, 0)
    query, params = conn.queries[0]
    assert "INSERT INTO reports" in query
    assert params[1] == "who"


def test_update_without_matching_row_fails_and_rolls_back() -> None:
    """An update touching no rows is a failed write."""
    conn = FakeConnection(rowcount=0)

    result = PostgresOutbreakStore(conn).update_outbreak_severity(
        "missing", Severity.CRITICAL, datetime(2024, 6, 1, tzinfo=timezone.utc)
    )

    assert not result.success
    assert result.error == "No rows affected"
    assert (conn.commits, conn.rollbacks) == (0, 1)


def test_database_error_becomes_failed_write() -> None:
    """Statement errors on a healthy connection roll back and return a failure."""
    conn = FakeConnection()
    conn.error = psycopg.DataError("invalid input syntax for type uuid")

    result = PostgresOutbreakStore(conn).create_report(make_stored_report())

    assert not result.success
    assert "invalid input syntax" in result.error
    assert (conn.commits, conn.rollbacks) == (0, 1)


def test_broken_connection_on_write_raises() -> None:
    """A write on a lost connection raises instead of returning a failure."""
    conn = FakeConnection()
    conn.error = psycopg.OperationalError("server closed the connection unexpectedly")
    conn.broken = True

    with pytest.raises(StorageConnectionError):
        PostgresOutbreakStore(conn).create_report(make_stored_report())


def test_list_outbreaks_parses_rows() -> None:
    """Rows become Outbreak models in storage order."""
    conn = FakeConnection(
        rows=[
            {"id": "a", "disease_name": "Cholera", "severity": "critical", "status": "active"},
            {"id": "b", "disease_name": "Dengue", "severity": "low", "status": "resolved"},
        ]
    )

    outbreaks = PostgresOutbreakStore(conn).list_outbreaks()

    assert [(o.id, o.disease_name, o.severity) for o in outbreaks] == [
        ("a", "Cholera", Severity.CRITICAL),
        ("b", "Dengue", Severity.LOW),
    ]


def test_read_error_raises_storage_read_error() -> None:
    """Failed reads are fatal for the caller."""
    conn = FakeConnection()
    conn.error = psycopg.ProgrammingError('relation "reports" does not exist')

    with pytest.raises(StorageReadError):
        PostgresOutbreakStore(conn).list_report_titles()

    assert conn.rollbacks == 1


def test_find_location_errors() -> None:
    """Lookup errors raise StorageError; a lost connection escalates."""
    conn = FakeConnection()
    conn.error = psycopg.DataError("bad uuid")
    store = PostgresOutbreakStore(conn)

    with pytest.raises(StorageError) as excinfo:
        store.find_location("not-a-uuid", "Sudan")
    assert not isinstance(excinfo.value, StorageConnectionError)

    conn.closed = True
    with pytest.raises(StorageConnectionError):
        store.find_location("not-a-uuid", "Sudan")


def test_find_location_returns_id_or_none() -> None:
    """The lookup returns the stored id, or None when absent."""
    assert PostgresOutbreakStore(FakeConnection(rows=[{"id": "loc-1"}])).find_location("o", "Sudan") == "loc-1"
    assert PostgresOutbreakStore(FakeConnection()).find_location("o", "Sudan") is None
