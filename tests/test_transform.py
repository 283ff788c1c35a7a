"""Tests for services/transform.py — normalization and post-fetch filters."""
import itertools

import pytest

from conftest import make_offer, make_segment
from flight_proxy.models.search import SearchRequest
from flight_proxy.services.transform import (
    build_filters, format_duration, normalize_offer, parse_price_amount, transform,
)


def _query(**overrides):
    base = {"origin": "CDG", "destination": "JFK", "date": "2025-07-01", "adults": 1}
    base.update(overrides)
    return SearchRequest(**base)


def _offer_with_stops(stops, carrier="AF", total="100.00"):
    segments = [make_segment(carrier=carrier, number=str(100 + i)) for i in range(stops + 1)]
    return make_offer(segments=segments, total=total)


# ── Normalization ────────────────────────────────────────────────────

def test_duration_strips_prefix_and_lowercases():
    assert format_duration("PT5H30M") == "5h30m"
    assert format_duration("PT45M") == "45m"


def test_price_joins_total_and_currency():
    offer = normalize_offer(make_offer(total="250.00", currency="EUR"))
    assert offer.price == "250.00 EUR"


def test_first_and_last_segment_fields():
    segments = [
        make_segment(carrier="AF", number="1680", dep="CDG", dep_at="2025-07-01T07:00:00",
                     arr="AMS", arr_at="2025-07-01T08:20:00", duration="PT1H20M"),
        make_segment(carrier="KL", number="641", dep="AMS", dep_at="2025-07-01T10:00:00",
                     arr="JFK", arr_at="2025-07-01T12:30:00", duration="PT8H30M"),
    ]
    offer = normalize_offer(make_offer(segments=segments, duration="PT11H30M"))

    assert offer.airline == "AF"
    assert offer.flight_number == "1680"
    assert offer.departure_airport == "CDG"
    assert offer.departure_time == "2025-07-01T07:00:00"
    assert offer.arrival_airport == "JFK"
    assert offer.arrival_time == "2025-07-01T12:30:00"
    assert offer.duration == "11h30m"
    assert offer.stops == 1


def test_segments_keep_provider_duration():
    offer = normalize_offer(make_offer(segments=[make_segment(duration="PT1H15M")]))
    assert offer.segments[0].duration == "PT1H15M"
    assert offer.segments[0].airline == "AF"


def test_only_first_itinerary_is_used():
    raw = make_offer()
    raw["itineraries"].append({
        "duration": "PT2H",
        "segments": [make_segment(carrier="BA", dep="LHR", arr="CDG")],
    })
    offer = normalize_offer(raw)
    assert offer.airline == "AF"
    assert offer.arrival_airport == "LHR"


def test_serialized_keys_are_camel_case():
    dumped = normalize_offer(make_offer()).model_dump(by_alias=True)
    assert set(dumped) == {
        "airline", "flightNumber", "departureAirport", "departureTime",
        "arrivalAirport", "arrivalTime", "duration", "price", "stops", "segments",
    }
    assert set(dumped["segments"][0]) == {
        "airline", "flightNumber", "departureAirport", "departureTime",
        "arrivalAirport", "arrivalTime", "duration",
    }


def test_missing_fields_raise():
    with pytest.raises(KeyError):
        normalize_offer({"itineraries": [{"segments": [make_segment()]}], "price": {}})


# ── parse_price_amount ───────────────────────────────────────────────

def test_parse_price_leading_number():
    assert parse_price_amount("250.00 EUR") == 250.0
    assert parse_price_amount("99 EUR") == 99.0


def test_parse_price_without_number():
    assert parse_price_amount("N/A EUR") is None


# ── Filters ──────────────────────────────────────────────────────────

def test_price_range_keeps_offers_inside_bounds():
    raw = [make_offer(total="90.00"), make_offer(total="150.00"), make_offer(total="250.00")]
    offers = transform(raw, _query(minPrice=100, maxPrice=200))
    assert [o.price for o in offers] == ["150.00 EUR"]


def test_price_bounds_are_inclusive():
    raw = [make_offer(total="100.00"), make_offer(total="200.00")]
    offers = transform(raw, _query(minPrice=100, maxPrice=200))
    assert len(offers) == 2


def test_price_filters_can_be_disabled():
    raw = [make_offer(total="90.00"), make_offer(total="250.00")]
    offers = transform(raw, _query(minPrice=100, maxPrice=200), price_filters=False)
    assert len(offers) == 2


def test_unparseable_price_dropped_by_price_filter():
    raw = [make_offer(total="N/A"), make_offer(total="150.00")]
    offers = transform(raw, _query(maxPrice=200))
    assert [o.price for o in offers] == ["150.00 EUR"]


def test_stops_is_exact_match():
    raw = [_offer_with_stops(0), _offer_with_stops(1), _offer_with_stops(2)]
    offers = transform(raw, _query(stops=0))
    assert [o.stops for o in offers] == [0]


def test_stops_one_excludes_direct():
    raw = [_offer_with_stops(0), _offer_with_stops(1), _offer_with_stops(2)]
    offers = transform(raw, _query(stops=1))
    assert [o.stops for o in offers] == [1]


def test_preferred_airlines_filter():
    raw = [_offer_with_stops(0, "AF"), _offer_with_stops(0, "BA"), _offer_with_stops(0, "LH")]
    offers = transform(raw, _query(preferredAirlines=["AF", "LH"]))
    assert [o.airline for o in offers] == ["AF", "LH"]


def test_no_filters_keeps_everything_in_order():
    raw = [make_offer(total="300.00"), make_offer(total="100.00"), make_offer(total="200.00")]
    offers = transform(raw, _query())
    assert [o.price for o in offers] == ["300.00 EUR", "100.00 EUR", "200.00 EUR"]


def test_combined_filters_preserve_order():
    raw = [
        _offer_with_stops(0, "LH", "180.00"),
        _offer_with_stops(1, "AF", "120.00"),
        _offer_with_stops(0, "BA", "150.00"),
        _offer_with_stops(0, "AF", "110.00"),
        _offer_with_stops(0, "AF", "500.00"),
    ]
    offers = transform(raw, _query(minPrice=100, maxPrice=200, stops=0, preferredAirlines=["AF", "LH"]))
    assert [(o.airline, o.price) for o in offers] == [("LH", "180.00 EUR"), ("AF", "110.00 EUR")]


def test_filter_order_does_not_change_survivors():
    raw = [
        _offer_with_stops(0, "LH", "180.00"),
        _offer_with_stops(1, "AF", "120.00"),
        _offer_with_stops(0, "BA", "150.00"),
        _offer_with_stops(0, "AF", "110.00"),
        _offer_with_stops(0, "AF", "500.00"),
        _offer_with_stops(0, "AF", "50.00"),
        _offer_with_stops(2, "LH", "190.00"),
    ]
    query = _query(minPrice=100, maxPrice=200, stops=0, preferredAirlines=["AF", "LH"])
    candidates = [(o, parse_price_amount(o.price)) for o in map(normalize_offer, raw)]
    filters = build_filters(query)
    assert len(filters) == 4

    survivors = set()
    for order in itertools.permutations(filters):
        remaining = candidates
        for keep in order:
            remaining = [(o, amount) for o, amount in remaining if keep(o, amount)]
        survivors.add(tuple((o.airline, o.price) for o, _ in remaining))

    assert survivors == {(("LH", "180.00 EUR"), ("AF", "110.00 EUR"))}
    assert [(o.airline, o.price) for o in transform(raw, query)] == list(survivors.pop())


def test_empty_input():
    assert transform([], _query(stops=0, minPrice=1)) == []


def test_numeric_price_not_on_output():
    offers = transform([make_offer()], _query(minPrice=1))
    dumped = offers[0].model_dump(by_alias=True)
    assert "priceValue" not in dumped
    assert "price_value" not in dumped
    assert dumped["price"] == "250.00 EUR"


def test_transform_is_repeatable():
    raw = [_offer_with_stops(0), _offer_with_stops(1)]
    query = _query(stops=1)
    assert transform(raw, query) == transform(raw, query)
