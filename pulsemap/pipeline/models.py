"""Pipeline models."""

import re
from datetime import date, datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..models import Severity

MAX_BACKFILL_LIMIT = 500
DEFAULT_BACKFILL_LIMIT = 200
BACKFILL_SOURCES = ("who", "all")

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class ProcessResult(BaseModel):
    """Counts produced by one merge pass."""

    new_outbreaks: int = Field(0, ge=0)
    new_locations: int = Field(0, ge=0)
    new_reports: int = Field(0, ge=0)
    skipped_duplicates: int = Field(0, ge=0)


class KnownOutbreak(BaseModel):
    """Outbreak id and severity as tracked during one merge pass."""

    id: str
    severity: Severity


class BackfillRequest(BaseModel):
    """Validated backfill parameters."""

    start_date: date = Field(..., description="First publication day (YYYY-MM-DD)")
    end_date: date = Field(..., description="Last publication day (YYYY-MM-DD)")
    source: str = Field("who", description="Source to backfill (who, all)")
    limit: int = Field(DEFAULT_BACKFILL_LIMIT, description="Max bulletins to fetch")

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def validate_date_format(cls, v: Any) -> Any:
        """Dates must be YYYY-MM-DD strings or date objects."""
        if isinstance(v, date):
            return v
        if not isinstance(v, str) or not _ISO_DATE.match(v):
            raise ValueError("Invalid date format. Use YYYY-MM-DD")
        try:
            return date.fromisoformat(v)
        except ValueError:
            raise ValueError("Invalid date format. Use YYYY-MM-DD")

    @field_validator("source")
    @classmethod
    def validate_source(cls, v: str) -> str:
        """Only WHO supports date-range queries."""
        if v not in BACKFILL_SOURCES:
            raise ValueError(f"Unsupported source: {v}. Available: {', '.join(BACKFILL_SOURCES)}")
        return v

    @field_validator("limit", mode="before")
    @classmethod
    def clamp_limit(cls, v: Any) -> int:
        """Clamp into [1, MAX_BACKFILL_LIMIT]; unusable values fall back to the default."""
        try:
            limit = int(v)
        except (TypeError, ValueError):
            return DEFAULT_BACKFILL_LIMIT
        if limit == 0:
            return DEFAULT_BACKFILL_LIMIT
        return min(max(1, limit), MAX_BACKFILL_LIMIT)

    @model_validator(mode="after")
    def validate_range(self) -> "BackfillRequest":
        """Start must not be after end."""
        if self.start_date > self.end_date:
            raise ValueError("startDate must be before endDate")
        return self


class RunSummary(BaseModel):
    """Outcome of one orchestrated pipeline run."""

    success: bool
    kind: str = Field("update", description="Run kind (update, backfill)")
    duration: float = Field(0.0, description="Elapsed seconds")
    sources: Dict[str, int] = Field(default_factory=dict, description="Reports fetched per source")
    fetched: int = Field(0, description="Total reports fetched")
    results: ProcessResult = Field(default_factory=ProcessResult)
    error: Optional[str] = Field(None)
    timestamp: datetime
