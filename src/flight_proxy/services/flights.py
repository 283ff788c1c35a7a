"""Flight offer search service."""

from __future__ import annotations

import logging
from typing import Any

from flight_proxy.client import ProviderClient
from flight_proxy.config import Settings
from flight_proxy.models.offers import NormalizedOffer
from flight_proxy.models.search import SearchRequest
from flight_proxy.services.transform import transform
from flight_proxy.utils.errors import UpstreamUnavailableError

logger = logging.getLogger(__name__)

FLIGHT_OFFERS_PATH = "/v2/shopping/flight-offers"


def build_search_params(query: SearchRequest, settings: Settings) -> dict[str, Any]:
    """Translate a validated query into provider search parameters.

    Price bounds and stop count are not supported by the provider and are
    applied after the fetch, so more offers than usual are requested.
    """
    params: dict[str, Any] = {
        "originLocationCode": query.origin,
        "destinationLocationCode": query.destination,
        "departureDate": query.date,
        "adults": query.adults,
        "currencyCode": settings.currency,
        "max": settings.max_results,
    }
    if query.airlines:
        params["includedAirlineCodes"] = ",".join(query.airlines)
    return params


class FlightSearchService:
    """Service for one-way flight offer searches."""

    def __init__(self, client: ProviderClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings

    def search(self, query: SearchRequest) -> list[dict[str, Any]]:
        """Fetch raw flight offers from the provider."""
        params = build_search_params(query, self._settings)
        payload = self._client.get(FLIGHT_OFFERS_PATH, params=params)

        offers = payload.get("data")
        if not isinstance(offers, list):
            raise UpstreamUnavailableError("Provider response has no offer list")
        return offers

    def search_offers(self, query: SearchRequest) -> list[NormalizedOffer]:
        """Fetch, normalize and filter flight offers for a query."""
        raw_offers = self.search(query)
        try:
            offers = transform(raw_offers, query, price_filters=self._settings.price_filters_enabled)
        except (KeyError, IndexError, TypeError, AttributeError, ValueError) as e:
            logger.error(f"Malformed flight offer from provider: {e!r}")
            raise UpstreamUnavailableError("Provider returned a malformed flight offer") from e

        logger.info(
            f"{query.origin}->{query.destination} {query.date}: "
            f"{len(offers)} of {len(raw_offers)} offers kept"
        )
        return offers
