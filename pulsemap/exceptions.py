"""Exceptions raised across the PulseMap pipeline."""


class PulseMapError(Exception):
    """Base class for PulseMap errors."""


class StorageError(PulseMapError):
    """A storage operation failed."""


class StorageReadError(StorageError):
    """Existing outbreak/report state could not be loaded."""


class StorageConnectionError(StorageError):
    """The storage connection itself is unusable."""


class FetchError(PulseMapError):
    """An upstream bulletin feed could not be fetched or parsed."""


class GeocodingError(PulseMapError):
    """A geocoder failed for a reason other than "not found"."""
