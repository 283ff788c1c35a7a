"""HTTP API for the flight search proxy.

Run with `flight-proxy serve`, or `uvicorn --factory flight_proxy.api:create_app`.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from flight_proxy.auth import TokenCache
from flight_proxy.client import ProviderClient
from flight_proxy.config import Config, get_config
from flight_proxy.models.offers import NormalizedOffer
from flight_proxy.models.search import HotelSearchRequest, SearchRequest
from flight_proxy.services.flights import FlightSearchService
from flight_proxy.services.hotels import HotelService
from flight_proxy.utils.errors import ProxyError, UpstreamSearchError

logger = logging.getLogger(__name__)

_UNAVAILABLE_MESSAGES = {
    "/search": "Error fetching flight offers. Please try again later.",
    "/hotel-search": "Error fetching hotel offers. Please try again later.",
}
_DEFAULT_UNAVAILABLE = "The travel provider is unavailable. Please try again later."


def _format_validation_errors(exc: RequestValidationError) -> str:
    """Join field-level validation messages into one line."""
    messages = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        msg = str(error.get("msg", "invalid value")).removeprefix("Value error, ")
        messages.append(f"{'.'.join(loc)}: {msg}" if loc else msg)
    return ", ".join(messages)


def register_exception_handlers(app: FastAPI) -> None:
    """Map every failure onto one status code and an `{"error": ...}` body."""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": _format_validation_errors(exc)},
        )

    @app.exception_handler(ProxyError)
    async def proxy_exception_handler(request: Request, exc: ProxyError):
        if isinstance(exc, UpstreamSearchError):
            message = exc.message
        else:
            message = _UNAVAILABLE_MESSAGES.get(request.url.path, _DEFAULT_UNAVAILABLE)
        logger.error(f"{request.url.path} failed ({exc.code}): {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": message})

    @app.exception_handler(Exception)
    async def unexpected_exception_handler(request: Request, exc: Exception):
        logger.error(f"{request.url.path} failed unexpectedly: {exc!r}", exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": _UNAVAILABLE_MESSAGES.get(request.url.path, _DEFAULT_UNAVAILABLE)},
        )


def create_app(
    config: Config | None = None,
    flights: FlightSearchService | None = None,
    hotels: HotelService | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Services are built from configuration unless injected. Missing provider
    credentials raise ConfigError, which stops startup.
    """
    if config is None:
        config = get_config()
    if flights is None or hotels is None:
        config.require_credentials()
        client = ProviderClient(config, TokenCache(config))
        flights = flights or FlightSearchService(client, config.settings)
        hotels = hotels or HotelService(client, config.settings)

    app = FastAPI(
        title="Flight Search Proxy",
        description="Validates flight/hotel searches and forwards them to the travel data provider",
        version="1.0.0",
    )
    app.state.flights = flights
    app.state.hotels = hotels

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    @app.get("/", response_class=PlainTextResponse)
    def root() -> str:
        """Liveness check."""
        return "Flight proxy is running"

    @app.get("/health")
    def health_check() -> dict[str, str]:
        return {"status": "healthy", "service": "flight-proxy"}

    @app.post("/search", response_model=list[NormalizedOffer])
    def search_flights(query: SearchRequest, request: Request) -> list[NormalizedOffer]:
        """Search one-way flight offers and apply post-fetch filters."""
        logger.info(f"Incoming /search request: {query.model_dump(by_alias=True, exclude_none=True)}")
        return request.app.state.flights.search_offers(query)

    @app.post("/hotel-search")
    def search_hotels(body: HotelSearchRequest, request: Request) -> dict[str, Any]:
        """List hotels in a city; the provider payload is returned unchanged."""
        logger.info(f"Incoming /hotel-search request: {body.city_code}")
        return request.app.state.hotels.by_city(body.city_code)

    return app
