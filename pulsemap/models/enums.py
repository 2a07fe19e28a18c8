"""Enumerations shared by raw and persisted records."""

from enum import Enum


class Severity(str, Enum):
    """Outbreak severity level."""

    LOW = "low"
    MODERATE = "moderate"
    SEVERE = "severe"
    CRITICAL = "critical"


class SourceType(str, Enum):
    """Kind of publisher a report came from."""

    WHO = "who"
    CDC = "cdc"
    NEWS = "news"
    USER = "user"


class OutbreakStatus(str, Enum):
    """Lifecycle status of an outbreak."""

    ACTIVE = "active"
    RESOLVED = "resolved"
