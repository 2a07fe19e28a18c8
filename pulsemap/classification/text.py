"""Text helpers shared by fetchers and the merge engine."""

from typing import Optional

SUMMARY_MAX_LENGTH = 500


def normalize_title(title: str) -> str:
    """Dedup key for report titles."""
    return title.strip().lower()


def truncate_summary(text: Optional[str], limit: int = SUMMARY_MAX_LENGTH) -> str:
    """Cut text to at most limit characters."""
    return (text or "")[:limit]
