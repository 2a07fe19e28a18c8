"""Outbreak and outbreak location models."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import DBModel
from .enums import OutbreakStatus, Severity


class Outbreak(DBModel):
    """One outbreak per disease name."""

    disease_name: str = Field(..., description="Canonical disease name, the dedup key")
    status: OutbreakStatus = Field(OutbreakStatus.ACTIVE, description="Outbreak status")
    severity: Severity = Field(Severity.MODERATE, description="Current severity")
    first_reported: Optional[datetime] = Field(None, description="Publication time of the first report")
    summary: Optional[str] = Field(None, description="Summary of the first report (max 500 chars)")
    last_updated: Optional[datetime] = Field(None, description="Last severity change")


class OutbreakLocation(DBModel):
    """Geocoded country an outbreak has been reported in."""

    outbreak_id: str = Field(..., description="Foreign key to outbreaks table")
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    country: str = Field(..., description="Country name as extracted from the report")
    region: Optional[str] = Field(None, description="Sub-national region, if known")
    case_count: int = Field(0, description="Reported cases", ge=0)
    severity_score: float = Field(..., description="Score derived from severity", ge=0.0, le=1.0)
