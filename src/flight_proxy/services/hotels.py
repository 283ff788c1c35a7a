"""Hotel lookup by city."""

from __future__ import annotations

from typing import Any

from flight_proxy.client import ProviderClient
from flight_proxy.config import Settings

HOTELS_BY_CITY_PATH = "/v1/reference-data/locations/hotels/by-city"


class HotelService:
    """Service for the provider's hotel-list-by-city endpoint."""

    def __init__(self, client: ProviderClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings

    def by_city(self, city_code: str) -> dict[str, Any]:
        """List hotels around a city, returning the provider payload unchanged."""
        params = {
            "cityCode": city_code.upper(),
            "radius": self._settings.hotel_radius,
        }
        return self._client.get(HOTELS_BY_CITY_PATH, params=params)
