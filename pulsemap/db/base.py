"""Storage capability used by the merge engine."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..models import Outbreak, OutbreakLocation, Report, Severity


class WriteResult(BaseModel):
    """Outcome of a single storage write."""

    success: bool = Field(..., description="Whether the write was applied")
    id: Optional[str] = Field(None, description="Id of the created row, if any")
    error: Optional[str] = Field(None, description="Error message if failed")

    @classmethod
    def ok(cls, id: Optional[str] = None) -> "WriteResult":
        """Successful write, with the new row id for inserts."""
        return cls(success=True, id=id)

    @classmethod
    def failed(cls, error: str) -> "WriteResult":
        """Write that was not applied."""
        return cls(success=False, error=error)


class OutbreakStore(ABC):
    """
    Persistent outbreak/location/report state.

    Reads raise StorageReadError when state cannot be loaded. Writes report
    failure through WriteResult and only raise StorageConnectionError when
    the store is unreachable.
    """

    @abstractmethod
    def list_outbreaks(self) -> List[Outbreak]:
        """All outbreaks, oldest first."""
        pass

    @abstractmethod
    def list_report_titles(self) -> List[str]:
        """Titles of all stored reports."""
        pass

    @abstractmethod
    def create_outbreak(self, outbreak: Outbreak) -> WriteResult:
        pass

    @abstractmethod
    def update_outbreak_severity(
        self,
        outbreak_id: str,
        severity: Severity,
        updated_at: datetime,
    ) -> WriteResult:
        pass

    @abstractmethod
    def find_location(self, outbreak_id: str, country: str) -> Optional[str]:
        """Id of the location for (outbreak, country), if one exists."""
        pass

    @abstractmethod
    def create_location(self, location: OutbreakLocation) -> WriteResult:
        pass

    @abstractmethod
    def create_report(self, report: Report) -> WriteResult:
        pass
