"""Run management in database."""

from datetime import datetime
from typing import Any, Dict, List, Optional

import pendulum
from psycopg import Connection
from psycopg.types.json import Jsonb

from ..models import PipelineRun


class RunManager:
    """Manage pipeline runs in database."""

    def create_run(
        self,
        conn: Connection,
        kind: str = "update",
        started_at: Optional[datetime] = None,
    ) -> int:
        """
        Create a new run record.

        Returns:
            Run ID
        """
        if started_at is None:
            started_at = pendulum.now("UTC")

        with conn.cursor() as cur:
            cur.execute(
                """
                INSERT INTO pipeline_runs (kind, started_at, status)
                VALUES (%s, %s, 'running')
                RETURNING id
                """,
                (kind, started_at),
            )
            run_id = cur.fetchone()["id"]

        conn.commit()
        return run_id

    def update_run_status(
        self,
        conn: Connection,
        run_id: int,
        status: str,
        stats_json: Optional[Dict[str, Any]] = None,
        finished_at: Optional[datetime] = None,
    ) -> None:
        """Update run status and statistics."""
        if finished_at is None and status in ["success", "failed"]:
            finished_at = pendulum.now("UTC")

        with conn.cursor() as cur:
            cur.execute(
                """
                UPDATE pipeline_runs
                SET
                    status = %s,
                    finished_at = %s,
                    stats_json = %s
                WHERE id = %s
                """,
                (status, finished_at, Jsonb(stats_json) if stats_json else None, run_id),
            )

        conn.commit()

    def get_recent_runs(
        self,
        conn: Connection,
        limit: int = 10,
    ) -> List[PipelineRun]:
        """Get recent runs, newest first."""
        with conn.cursor() as cur:
            cur.execute(
                """
                SELECT id::text AS id, kind, started_at, finished_at, status, stats_json,
                       created_at, updated_at
                FROM pipeline_runs
                ORDER BY started_at DESC
                LIMIT %s
                """,
                (limit,),
            )
            return [PipelineRun(**row) for row in cur.fetchall()]
