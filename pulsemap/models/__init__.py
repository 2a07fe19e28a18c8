"""Data models for PulseMap."""

from .enums import OutbreakStatus, Severity, SourceType
from .outbreak import Outbreak, OutbreakLocation
from .report import Report
from .run import PipelineRun

__all__ = [
    "Outbreak",
    "OutbreakLocation",
    "OutbreakStatus",
    "PipelineRun",
    "Report",
    "Severity",
    "SourceType",
]
