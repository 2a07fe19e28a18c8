"""Heuristic bulletin classification."""

from .country import GLOBAL_COUNTRY, UNKNOWN_COUNTRY, extract_country, is_global_country
from .disease import DISEASE_PATTERNS, UNKNOWN_DISEASE, extract_disease
from .severity import (
    DEFAULT_SEVERITY,
    SEVERITY_RANK,
    SEVERITY_SCORE,
    estimate_severity,
    is_escalation,
    severity_rank,
    severity_score,
)
from .text import SUMMARY_MAX_LENGTH, normalize_title, truncate_summary

__all__ = [
    "DEFAULT_SEVERITY",
    "DISEASE_PATTERNS",
    "GLOBAL_COUNTRY",
    "SEVERITY_RANK",
    "SEVERITY_SCORE",
    "SUMMARY_MAX_LENGTH",
    "UNKNOWN_COUNTRY",
    "UNKNOWN_DISEASE",
    "estimate_severity",
    "extract_country",
    "extract_disease",
    "is_escalation",
    "is_global_country",
    "normalize_title",
    "severity_rank",
    "severity_score",
    "truncate_summary",
]
