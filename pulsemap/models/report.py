"""Report model for stored bulletins."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import DBModel
from .enums import SourceType


class Report(DBModel):
    """A single stored bulletin, unique by normalized title."""

    outbreak_id: str = Field(..., description="Foreign key to outbreaks table")
    source_type: SourceType = Field(..., description="Publisher kind")
    source_name: str = Field(..., description="Publisher name")
    title: str = Field(..., description="Bulletin title")
    url: Optional[str] = Field(None, description="Link to the bulletin")
    content: str = Field("", description="Truncated bulletin summary")
    published_at: datetime = Field(..., description="Publication timestamp")
