"""Outbreak merge pipeline."""

from .dedup import ReportMerger, process_reports
from .models import BackfillRequest, KnownOutbreak, ProcessResult, RunSummary
from .orchestrator import PipelineOrchestrator, PipelineStage

__all__ = [
    "BackfillRequest",
    "KnownOutbreak",
    "PipelineOrchestrator",
    "PipelineStage",
    "ProcessResult",
    "ReportMerger",
    "RunSummary",
    "process_reports",
]
