"""Country/region geocoding."""

from abc import ABC, abstractmethod
from typing import Optional
from urllib.parse import quote

import httpx
from pydantic import BaseModel, Field
from rich.console import Console

from ..config import GeocoderConfig
from .countries import COUNTRY_COORDS

console = Console()


class Coordinates(BaseModel):
    """A point on the map."""

    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)


class BaseGeocoder(ABC):
    """Base class for geocoders."""

    @abstractmethod
    def geocode(self, country: str, region: Optional[str] = None) -> Optional[Coordinates]:
        """
        Resolve a country (and optional region) to coordinates.

        Returns:
            Coordinates, or None when the place is unknown
        """
        pass


class Geocoder(BaseGeocoder):
    """Static country table with a Mapbox fallback."""

    def __init__(
        self,
        config: Optional[GeocoderConfig] = None,
        mapbox_token: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """Initialize geocoder."""
        self.config = config or GeocoderConfig()
        self.mapbox_token = mapbox_token
        self.transport = transport

    def geocode(self, country: str, region: Optional[str] = None) -> Optional[Coordinates]:
        """Look the country up statically, then ask Mapbox."""
        static_coords = COUNTRY_COORDS.get(country)
        if static_coords:
            longitude, latitude = static_coords
            return Coordinates(latitude=latitude, longitude=longitude)

        if not self.mapbox_token:
            console.print("[yellow]No Mapbox token for geocoding[/yellow]")
            return None

        query = f"{region}, {country}" if region else country
        return self._geocode_mapbox(query)

    def _geocode_mapbox(self, query: str) -> Optional[Coordinates]:
        url = f"{self.config.mapbox_url}/{quote(query, safe='')}.json"
        params = {
            "access_token": self.mapbox_token,
            "types": "country,region,place",
            "limit": "1",
        }

        try:
            with httpx.Client(timeout=self.config.timeout, transport=self.transport) as client:
                response = client.get(url, params=params)
                if response.is_error:
                    return None

                data = response.json()
            features = data.get("features") if isinstance(data, dict) else None
            first = features[0] if isinstance(features, list) and features else None
            center = first.get("center") if isinstance(first, dict) else None
            if isinstance(center, list) and len(center) >= 2:
                return Coordinates(latitude=center[1], longitude=center[0])
        except (httpx.HTTPError, ValueError, KeyError, TypeError, IndexError, AttributeError) as e:
            console.print(f"[red]Geocoding failed for \"{query}\": {e}[/red]")

        return None
