"""Data models for ingestion."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ..models import Severity, SourceType


class RawReport(BaseModel):
    """Normalized bulletin produced by a fetcher, not persisted as-is."""

    disease_name: str = Field(..., description="Canonical disease name or 'Unknown Disease'")
    country: str = Field(..., description="Country name or 'Unknown'")
    region: Optional[str] = Field(None, description="Sub-national region, if known")
    title: str = Field(..., description="Bulletin title")
    summary: str = Field("", description="Bulletin summary")
    url: Optional[str] = Field(None, description="Link to the bulletin")
    source_type: SourceType = Field(..., description="Publisher kind")
    source_name: str = Field(..., description="Publisher name")
    published_at: datetime = Field(..., description="Publication timestamp")
    severity_hint: Optional[Severity] = Field(None, description="Estimated severity")
    case_count: Optional[int] = Field(None, description="Reported cases", ge=0)

    class Config:
        """Pydantic config."""

        frozen = True


class FetchResult(BaseModel):
    """Result of fetching one source."""

    source_name: str = Field(..., description="Source name")
    success: bool = Field(..., description="Whether fetch was successful")
    reports: list[RawReport] = Field(default_factory=list, description="Parsed reports")
    error: Optional[str] = Field(None, description="Error message if failed")
    report_count: int = Field(0, description="Number of reports parsed")
