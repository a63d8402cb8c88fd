"""
Geocoding Service

Thin proxy over the OpenCage geocoder. Accepts either a "lat,lon" pair or a
free-text place name and normalizes the first hit.

OpenCage API: https://opencagedata.com/api
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from app.core.config import settings

logger = logging.getLogger(__name__)

COORDINATE_PATTERN = re.compile(r"^-?\d{1,3}(\.\d+)?\s*,\s*-?\d{1,3}(\.\d+)?$")
MIN_TEXT_QUERY_LENGTH = 2


class GeocodingError(Exception):
    """Base class; every subclass maps to one HTTP status"""
    status_code = 500
    retryable = False

    def __init__(self, message: str, query: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.query = query


class InvalidLocationQuery(GeocodingError):
    status_code = 400


class LocationNotFound(GeocodingError):
    status_code = 404


class GeocodingTimeout(GeocodingError):
    """Upstream did not answer in time; the caller may retry"""
    status_code = 504
    retryable = True


class GeocodingUpstreamError(GeocodingError):
    """Bad status code, API-level error or unparseable body"""
    status_code = 500


@dataclass
class GeocodeResult:
    """Normalized geocoder hit"""
    lat: float
    lon: float
    display_name: str
    components: Dict[str, Any] = field(default_factory=dict)
    boundingbox: Optional[Dict[str, Any]] = None


class GeocodingService:
    """
    OpenCage geocoding proxy

    Single request per lookup with a bounded timeout (5 s by default).
    """

    def __init__(
        self,
        api_key: str = settings.OPENCAGE_API_KEY,
        base_url: str = settings.OPENCAGE_URL,
        timeout: float = settings.GEOCODING_TIMEOUT_SECONDS,
        user_agent: str = settings.GEOCODING_USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self.user_agent = user_agent
        self.transport = transport

        if not self.api_key:
            logger.warning("OPENCAGE_API_KEY is not set; upstream lookups will be rejected")

    def build_query(self, query: Optional[str]) -> str:
        """
        Validate a user query and turn it into the upstream `q` parameter

        Raises:
            InvalidLocationQuery: empty text, out-of-range coordinates or a
                place name shorter than two characters
        """
        if not query or not isinstance(query, str):
            raise InvalidLocationQuery("Invalid location query", query)

        trimmed = query.strip()
        if not trimmed:
            raise InvalidLocationQuery("Empty location query", query)

        if COORDINATE_PATTERN.match(trimmed):
            lat, lon = (float(part.strip()) for part in trimmed.split(","))
            if abs(lat) > 90 or abs(lon) > 180:
                raise InvalidLocationQuery(
                    "Invalid coordinates - latitude must be between -90 and 90, "
                    "longitude between -180 and 180",
                    trimmed
                )
            return f"{lat},{lon}"

        if len(trimmed) < MIN_TEXT_QUERY_LENGTH:
            raise InvalidLocationQuery("Search query too short", trimmed)
        return trimmed

    async def fetch_location_data(self, upstream_query: str) -> Dict[str, Any]:
        """Call OpenCage and return the decoded body"""
        params = {
            "q": upstream_query,
            "key": self.api_key,
            "no_annotations": 1,
            "limit": 1
        }
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/json"
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(self.base_url, params=params, headers=headers)
        except httpx.TimeoutException:
            raise GeocodingTimeout("Request timeout", upstream_query)
        except httpx.HTTPError as e:
            raise GeocodingUpstreamError(f"Network error: {e}", upstream_query)

        if response.status_code < 200 or response.status_code >= 300:
            raise GeocodingUpstreamError(
                f"API request failed with status code {response.status_code}",
                upstream_query
            )

        try:
            data = response.json()
        except ValueError:
            raise GeocodingUpstreamError("Failed to parse API response", upstream_query)
        if not isinstance(data, dict):
            raise GeocodingUpstreamError("Failed to parse API response", upstream_query)

        upstream_status = data.get("status") or {}
        if upstream_status.get("code", 200) != 200:
            raise GeocodingUpstreamError(
                upstream_status.get("message") or "OpenCage API error",
                upstream_query
            )

        return data

    @staticmethod
    def build_display_name(formatted: str, components: Dict[str, Any]) -> str:
        """Prefer "locality, state, country [postcode]" over the raw formatted string"""
        locality = components.get("city") or components.get("town") or components.get("village")
        state = components.get("state")
        if locality and state:
            display_name = f"{locality}, {state}, {components.get('country')}"
            if components.get("postcode"):
                display_name += f" {components['postcode']}"
            return display_name
        return formatted

    async def find_location(self, query: Optional[str]) -> GeocodeResult:
        """
        Resolve a place name or coordinate pair

        Raises:
            InvalidLocationQuery, LocationNotFound, GeocodingTimeout,
            GeocodingUpstreamError
        """
        upstream_query = self.build_query(query)
        logger.debug(f"Geocoding '{upstream_query}'")

        try:
            data = await self.fetch_location_data(upstream_query)
        except GeocodingError as e:
            logger.warning(f"Geocoding failed for '{upstream_query}': {e.message}")
            raise

        results = data.get("results") or []
        if not results:
            raise LocationNotFound("No matching location found", upstream_query)

        hit = results[0]
        geometry = hit.get("geometry") or {}
        components = hit.get("components") or {}
        try:
            lat, lon = float(geometry["lat"]), float(geometry["lng"])
        except (KeyError, TypeError, ValueError):
            raise GeocodingUpstreamError("Failed to parse API response", upstream_query)

        return GeocodeResult(
            lat=lat,
            lon=lon,
            display_name=self.build_display_name(hit.get("formatted", ""), components),
            components=components,
            boundingbox=hit.get("bounds")
        )


# Singleton instance
geocoding_service = GeocodingService()
