"""PulseMap - disease outbreak bulletin ingestion pipeline."""

__version__ = "0.1.0"
