"""Reshape provider flight offers and apply post-fetch filters.

Everything here is pure: no I/O, same output for the same input. Filters only
remove offers, so the provider's ordering is kept.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Iterable

from flight_proxy.models.offers import NormalizedOffer, SegmentDetail
from flight_proxy.models.search import SearchRequest

_LEADING_NUMBER = re.compile(r"^\s*(-?\d+(?:\.\d+)?)")

# (offer, numeric price) -> keep?
OfferFilter = Callable[[NormalizedOffer, float | None], bool]


def format_duration(duration: str) -> str:
    """PT5H30M -> 5h30m."""
    return duration.replace("PT", "", 1).lower()


def format_price(price: dict[str, Any]) -> str:
    """{"total": "250.00", "currency": "EUR"} -> "250.00 EUR"."""
    return f"{price['total']} {price['currency']}"


def parse_price_amount(price: str) -> float | None:
    """Numeric value of the leading number in a price string, or None."""
    match = _LEADING_NUMBER.match(price)
    if not match:
        return None
    return float(match.group(1))


def normalize_segment(segment: dict[str, Any]) -> SegmentDetail:
    """Map one provider flight segment to a SegmentDetail."""
    return SegmentDetail(
        airline=segment["carrierCode"],
        flight_number=str(segment["number"]),
        departure_airport=segment["departure"]["iataCode"],
        departure_time=segment["departure"]["at"],
        arrival_airport=segment["arrival"]["iataCode"],
        arrival_time=segment["arrival"]["at"],
        duration=segment.get("duration"),
    )


def normalize_offer(raw: dict[str, Any]) -> NormalizedOffer:
    """Map one provider offer to the frontend shape.

    Only the first itinerary is used; return legs are ignored. Raises
    KeyError, IndexError, TypeError, AttributeError or ValueError when the
    offer is missing fields or carries nulls where strings are expected.
    """
    itinerary = raw["itineraries"][0]
    segments = [normalize_segment(s) for s in itinerary["segments"]]
    first, last = segments[0], segments[-1]

    return NormalizedOffer(
        airline=first.airline,
        flight_number=first.flight_number,
        departure_airport=first.departure_airport,
        departure_time=first.departure_time,
        arrival_airport=last.arrival_airport,
        arrival_time=last.arrival_time,
        duration=format_duration(itinerary["duration"]),
        price=format_price(raw["price"]),
        stops=len(segments) - 1,
        segments=segments,
    )


def build_filters(query: SearchRequest, price_filters: bool = True) -> list[OfferFilter]:
    """Filters requested by the query, in the order they are applied."""
    filters: list[OfferFilter] = []

    if price_filters and query.min_price is not None:
        min_price = query.min_price
        filters.append(lambda offer, amount: amount is not None and amount >= min_price)

    if price_filters and query.max_price is not None:
        max_price = query.max_price
        filters.append(lambda offer, amount: amount is not None and amount <= max_price)

    if query.stops is not None:
        stops = query.stops
        filters.append(lambda offer, amount: offer.stops == stops)

    if query.airlines:
        airlines = set(query.airlines)
        filters.append(lambda offer, amount: offer.airline in airlines)

    return filters


def transform(
    raw_offers: Iterable[dict[str, Any]],
    query: SearchRequest,
    price_filters: bool = True,
) -> list[NormalizedOffer]:
    """Normalize raw provider offers and keep those matching the query.

    The numeric price lives only alongside each offer while filtering and
    never ends up on the returned objects.
    """
    candidates = []
    for raw in raw_offers:
        offer = normalize_offer(raw)
        candidates.append((offer, parse_price_amount(offer.price)))

    for keep in build_filters(query, price_filters):
        if not candidates:
            break
        candidates = [(offer, amount) for offer, amount in candidates if keep(offer, amount)]

    return [offer for offer, _ in candidates]
