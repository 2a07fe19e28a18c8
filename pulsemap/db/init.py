"""Database initialization and schema management."""

from typing import Any, Dict

from psycopg.errors import DatabaseError

from .connection import get_connection


SCHEMA_SQL = """
-- Outbreaks table, one row per disease name
CREATE TABLE IF NOT EXISTS outbreaks (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    disease_name TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'active' CHECK (status IN ('active', 'resolved')),
    severity TEXT NOT NULL DEFAULT 'moderate'
        CHECK (severity IN ('low', 'moderate', 'severe', 'critical')),
    first_reported TIMESTAMPTZ,
    summary TEXT,
    last_updated TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);

-- Outbreak locations table
CREATE TABLE IF NOT EXISTS outbreak_locations (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    outbreak_id UUID NOT NULL REFERENCES outbreaks(id) ON DELETE CASCADE,
    latitude DOUBLE PRECISION NOT NULL,
    longitude DOUBLE PRECISION NOT NULL,
    country TEXT NOT NULL,
    region TEXT,
    case_count INTEGER NOT NULL DEFAULT 0 CHECK (case_count >= 0),
    severity_score REAL NOT NULL CHECK (severity_score >= 0 AND severity_score <= 1),
    created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);

-- Reports table (title uniqueness is enforced by the merge engine)
CREATE TABLE IF NOT EXISTS reports (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    outbreak_id UUID NOT NULL REFERENCES outbreaks(id) ON DELETE CASCADE,
    source_type TEXT NOT NULL CHECK (source_type IN ('who', 'cdc', 'news', 'user')),
    source_name TEXT NOT NULL,
    title TEXT NOT NULL,
    url TEXT,
    content TEXT NOT NULL DEFAULT '',
    published_at TIMESTAMPTZ NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);

-- Pipeline runs table
CREATE TABLE IF NOT EXISTS pipeline_runs (
    id SERIAL PRIMARY KEY,
    kind TEXT NOT NULL DEFAULT 'update' CHECK (kind IN ('update', 'backfill')),
    started_at TIMESTAMPTZ NOT NULL,
    finished_at TIMESTAMPTZ,
    status TEXT NOT NULL DEFAULT 'running' CHECK (status IN ('running', 'success', 'failed')),
    stats_json JSONB,
    created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);

-- Create indexes
CREATE INDEX IF NOT EXISTS idx_outbreaks_disease_name ON outbreaks(disease_name);
CREATE INDEX IF NOT EXISTS idx_outbreak_locations_outbreak_country
    ON outbreak_locations(outbreak_id, country);
CREATE INDEX IF NOT EXISTS idx_reports_outbreak_id ON reports(outbreak_id);
CREATE INDEX IF NOT EXISTS idx_reports_title ON reports(lower(trim(title)));
CREATE INDEX IF NOT EXISTS idx_reports_published_at ON reports(published_at);
CREATE INDEX IF NOT EXISTS idx_pipeline_runs_started_at ON pipeline_runs(started_at);

-- Update trigger function
CREATE OR REPLACE FUNCTION update_updated_at_column()
RETURNS TRIGGER AS $$
BEGIN
    NEW.updated_at = CURRENT_TIMESTAMP;
    RETURN NEW;
END;
$$ language 'plpgsql';

-- Create update triggers
CREATE OR REPLACE TRIGGER update_outbreaks_updated_at BEFORE UPDATE ON outbreaks
    FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();

CREATE OR REPLACE TRIGGER update_outbreak_locations_updated_at BEFORE UPDATE ON outbreak_locations
    FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();

CREATE OR REPLACE TRIGGER update_reports_updated_at BEFORE UPDATE ON reports
    FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();

CREATE OR REPLACE TRIGGER update_pipeline_runs_updated_at BEFORE UPDATE ON pipeline_runs
    FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();
"""


def validate_connection(config: Dict[str, Any]) -> bool:
    """Validate database connection."""
    try:
        with get_connection(config) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1 AS ok")
                result = cur.fetchone()
                return result is not None and result["ok"] == 1
    except Exception as e:
        print(f"Database connection failed: {e}")
        return False


def init_database(config: Dict[str, Any]) -> None:
    """Initialize database schema."""
    try:
        with get_connection(config) as conn:
            with conn.cursor() as cur:
                # Execute schema SQL
                cur.execute(SCHEMA_SQL)
                conn.commit()
                print("Database schema initialized successfully")
    except DatabaseError as e:
        print(f"Failed to initialize database schema: {e}")
        raise
