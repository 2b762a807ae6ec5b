"""
Reverse geocoding of photo coordinates.

NominatimGeocoder queries the OpenStreetMap Nominatim reverse endpoint. Any
other object with a compatible ``reverse(lat, lon)`` method can be passed to
the reconciler instead (tests use an in-memory fake).
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

import requests

from photo_index.exceptions import LocationError

logger = logging.getLogger(__name__)

# Nominatim reports the settlement under different keys depending on its size
CITY_KEYS = ("city", "town", "village", "hamlet", "municipality")


@dataclass(frozen=True)
class LocationInfo:
    """A resolved place, keyed by the geocoding service's identifier."""
    id: str
    name: Optional[str] = None
    city: Optional[str] = None
    county: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    country_code: Optional[str] = None
    category: Optional[str] = None
    type: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class Geocoder(Protocol):
    def reverse(self, latitude: float, longitude: float) -> LocationInfo:
        ...


class NominatimGeocoder:
    """Reverse geocoder backed by an OpenStreetMap Nominatim server.

    Args:
        url: Reverse endpoint URL
        user_agent: User-Agent header; the public server rejects anonymous clients
        timeout: Request timeout in seconds
        language: Preferred language for names
        session: Optional requests session (created if not given)
    """

    def __init__(
        self,
        url: str = "https://nominatim.openstreetmap.org/reverse",
        user_agent: str = "photo-index",
        timeout: float = 10.0,
        language: str = "en",
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.language = language
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    def reverse(self, latitude: float, longitude: float) -> LocationInfo:
        """Resolve coordinates to a place.

        Raises:
            LocationError: If the request fails or nothing is found
        """
        params = {
            "lat": f"{latitude:.6f}",
            "lon": f"{longitude:.6f}",
            "format": "jsonv2",
            "addressdetails": 1,
            "accept-language": self.language,
        }

        try:
            response = self.session.get(self.url, params=params, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            raise LocationError(f"Reverse geocoding failed for {latitude}, {longitude}: {e}") from e
        except ValueError as e:
            raise LocationError(f"Invalid geocoding response for {latitude}, {longitude}") from e

        if not isinstance(payload, dict) or "error" in payload:
            raise LocationError(f"No location found for {latitude}, {longitude}")

        return parse_nominatim(payload)


def parse_nominatim(payload: Dict[str, Any]) -> LocationInfo:
    """Convert a Nominatim ``jsonv2`` reverse response into a LocationInfo."""
    if payload.get("osm_type") and payload.get("osm_id"):
        location_id = f"osm:{payload['osm_type']}:{payload['osm_id']}"
    elif payload.get("place_id"):
        location_id = f"nominatim:{payload['place_id']}"
    else:
        raise LocationError("Geocoding response has no place identifier")

    address = payload.get("address") or {}
    city = next((address[key] for key in CITY_KEYS if address.get(key)), None)
    country_code = address.get("country_code")

    return LocationInfo(
        id=location_id,
        name=payload.get("name") or None,
        city=city,
        county=address.get("county"),
        state=address.get("state"),
        country=address.get("country"),
        country_code=country_code.lower() if country_code else None,
        category=payload.get("category"),
        type=payload.get("type"),
        latitude=_to_float(payload.get("lat")),
        longitude=_to_float(payload.get("lon")),
    )


def _to_float(value) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
