# moodlog/services/location_provider.py
import logging
from abc import ABC, abstractmethod

import httpx

from moodlog.config import LocationConfig
from moodlog.errors import LocationUnavailableError, PermissionDeniedError
from moodlog.models.sample import Location

logger = logging.getLogger(__name__)

class LocationProvider(ABC):
    @abstractmethod
    async def get_fix(self) -> Location:
        pass


class FixedLocationProvider(LocationProvider):
    """Returns the coordinates configured for this device"""

    def __init__(self, config: LocationConfig):
        self.config = config

    async def get_fix(self) -> Location:
        if self.config.lat is None or self.config.lng is None:
            raise PermissionDeniedError("location", "No location configured: set LOCATION_LAT and LOCATION_LNG")
        return Location(lat=self.config.lat, lng=self.config.lng)


class IpLocationProvider(LocationProvider):
    """Approximate fix from an IP geolocation service"""

    def __init__(self, config: LocationConfig, client: httpx.AsyncClient = None):
        self.config = config
        self.client = client

    async def get_fix(self) -> Location:
        try:
            if self.client is not None:
                response = await self.client.get(self.config.url, timeout=self.config.timeout)
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.get(self.config.url, timeout=self.config.timeout)
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Location lookup failed: {e}")
            raise LocationUnavailableError(f"Could not get a location fix: {e}") from e

        if not isinstance(payload, dict):
            raise LocationUnavailableError("Location service response is not a JSON object")

        if payload.get("status") not in (None, "success"):
            raise LocationUnavailableError(f"Location service refused the lookup: {payload.get('message', payload.get('status'))}")

        lat = payload.get("lat", payload.get("latitude"))
        lng = payload.get("lon", payload.get("lng", payload.get("longitude")))
        if lat is None or lng is None:
            raise LocationUnavailableError("Location service response has no coordinates")

        try:
            return Location(lat=float(lat), lng=float(lng))
        except (TypeError, ValueError) as e:
            raise LocationUnavailableError(f"Location service returned invalid coordinates: {lat}, {lng}") from e


def create_location_provider(config: LocationConfig) -> LocationProvider:
    if config.provider == "ip":
        return IpLocationProvider(config)
    return FixedLocationProvider(config)
