"""Geocoding of outbreak locations."""

from .countries import COUNTRY_COORDS
from .geocoder import BaseGeocoder, Coordinates, Geocoder

__all__ = ["BaseGeocoder", "COUNTRY_COORDS", "Coordinates", "Geocoder"]
