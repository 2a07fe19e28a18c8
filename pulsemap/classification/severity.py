"""Severity estimation, ranking and scoring."""

from typing import Dict, Optional

from ..models import Severity

SEVERITY_RANK: Dict[Severity, int] = {
    Severity.LOW: 1,
    Severity.MODERATE: 2,
    Severity.SEVERE: 3,
    Severity.CRITICAL: 4,
}

SEVERITY_SCORE: Dict[Severity, float] = {
    Severity.LOW: 0.3,
    Severity.MODERATE: 0.5,
    Severity.SEVERE: 0.75,
    Severity.CRITICAL: 0.9,
}

DEFAULT_SEVERITY = Severity.MODERATE

# (phrases, severity) checked in order against "title summary", lower-cased.
# Explicit WHO risk assessments come before the keyword fallback.
SEVERITY_RULES = [
    (("risk is high", "public health emergency"), Severity.CRITICAL),
    (("risk is moderate",), Severity.SEVERE),
    (("risk is low",), Severity.MODERATE),
    (("death", "fatal", "emergency"), Severity.CRITICAL),
    (("outbreak", "surge", "spreading"), Severity.SEVERE),
    (("cases", "detected"), Severity.MODERATE),
]


def estimate_severity(title: str, summary: str) -> Severity:
    """Estimate bulletin severity from its title and summary."""
    text = f"{title} {summary}".lower()
    for phrases, severity in SEVERITY_RULES:
        if any(phrase in text for phrase in phrases):
            return severity
    return Severity.LOW


def severity_rank(severity: Severity) -> int:
    """Position of a severity in the low < moderate < severe < critical order."""
    return SEVERITY_RANK[Severity(severity)]


def severity_score(severity: Optional[Severity]) -> float:
    """Location score for a severity; missing severity scores as moderate."""
    return SEVERITY_SCORE[Severity(severity or DEFAULT_SEVERITY)]


def is_escalation(current: Severity, candidate: Optional[Severity]) -> bool:
    """Whether candidate ranks strictly above current. None never escalates."""
    if candidate is None:
        return False
    return severity_rank(candidate) > severity_rank(current)
