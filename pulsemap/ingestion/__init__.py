"""Bulletin ingestion from upstream public health sources."""

from .base import (
    BaseFetcher,
    fetch_all_sources,
    fetch_all_sources_sync,
    print_fetch_summary,
)
from .models import FetchResult, RawReport
from .reliefweb_fetcher import ReliefWebFetcher
from .who_fetcher import WHOFetcher, parse_don_items

__all__ = [
    "BaseFetcher",
    "FetchResult",
    "RawReport",
    "ReliefWebFetcher",
    "WHOFetcher",
    "fetch_all_sources",
    "fetch_all_sources_sync",
    "parse_don_items",
    "print_fetch_summary",
]
