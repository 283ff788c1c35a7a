"""Shared fixtures for the flight proxy test suite."""
from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from flight_proxy.config import Config, ProviderEnvironment, Settings


@pytest.fixture
def fake_settings() -> Settings:
    return Settings(
        client_id="test-client-id",
        client_secret="test-client-secret",
        environment="test",
        currency="EUR",
        max_results=20,
        hotel_radius=20,
        http_timeout=5.0,
        price_filters_enabled=True,
        cors_origins=["http://localhost:5173"],
    )


@pytest.fixture
def fake_environments() -> dict[str, ProviderEnvironment]:
    return {
        "test": ProviderEnvironment(
            api_endpoint="https://test.api.amadeus.com",
            token_endpoint="https://test.api.amadeus.com/v1/security/oauth2/token",
        ),
        "production": ProviderEnvironment(
            api_endpoint="https://api.amadeus.com",
            token_endpoint="https://api.amadeus.com/v1/security/oauth2/token",
        ),
    }


@pytest.fixture
def fake_config(fake_settings, fake_environments) -> Config:
    return Config(settings=fake_settings, environments=fake_environments)


@pytest.fixture
def mock_client():
    """MagicMock standing in for ProviderClient."""
    client = MagicMock()
    client.get = MagicMock()
    client.close = MagicMock()
    return client


def make_segment(carrier="AF", number="1234", dep="CDG", dep_at="2025-07-01T08:00:00",
                 arr="LHR", arr_at="2025-07-01T09:15:00", duration="PT1H15M"):
    return {
        "carrierCode": carrier,
        "number": number,
        "departure": {"iataCode": dep, "at": dep_at},
        "arrival": {"iataCode": arr, "at": arr_at},
        "duration": duration,
    }


def make_offer(segments=None, total="250.00", currency="EUR", duration="PT5H30M"):
    """Build a raw provider flight offer."""
    return {
        "type": "flight-offer",
        "itineraries": [{"duration": duration, "segments": segments or [make_segment()]}],
        "price": {"total": total, "currency": currency},
    }


@pytest.fixture
def raw_offer():
    return make_offer()
