"""CLI commands for flight and hotel searches."""

from __future__ import annotations

from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console

from flight_proxy.auth import TokenCache
from flight_proxy.client import ProviderClient
from flight_proxy.config import Config, get_config
from flight_proxy.models.search import HotelSearchRequest, SearchRequest
from flight_proxy.services.flights import FlightSearchService
from flight_proxy.services.hotels import HotelService
from flight_proxy.utils.errors import ProxyError, handle_error
from flight_proxy.utils.output import OutputFormat, print_hotels, print_offers

console = Console(stderr=True)
app = typer.Typer(name="search", help="Run searches against the provider from the command line.")


def _build_client(verbose: bool = False) -> tuple[Config, ProviderClient]:
    config = get_config()
    config.require_credentials()
    client = ProviderClient(config, TokenCache(config), verbose=verbose)
    return config, client


def _validation_message(e: ValidationError) -> str:
    return ", ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg'].removeprefix('Value error, ')}"
        for err in e.errors()
    )


@app.command("flights")
def search_flights(
    origin: Annotated[str, typer.Option("--origin", "-f", help="Origin IATA code")] = ...,
    destination: Annotated[str, typer.Option("--destination", "-t", help="Destination IATA code")] = ...,
    date: Annotated[str, typer.Option("--date", "-d", help="Departure date (YYYY-MM-DD)")] = ...,
    adults: Annotated[int, typer.Option("--adults", "-a", help="Number of adults (1-9)")] = 1,
    airline: Annotated[list[str] | None, typer.Option("--airline", help="Preferred carrier code (repeatable)")] = None,
    stops: Annotated[int | None, typer.Option("--stops", help="Exact number of stops")] = None,
    min_price: Annotated[float | None, typer.Option("--min-price", help="Minimum total price")] = None,
    max_price: Annotated[float | None, typer.Option("--max-price", help="Maximum total price")] = None,
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
) -> None:
    """Search one-way flight offers."""
    try:
        query = SearchRequest(
            origin=origin,
            destination=destination,
            date=date,
            adults=adults,
            preferred_airlines=airline or None,
            stops=stops,
            min_price=min_price,
            max_price=max_price,
        )
    except ValidationError as e:
        console.print(f"[red]Invalid search:[/red] {_validation_message(e)}")
        raise typer.Exit(2)

    try:
        config, client = _build_client(verbose)
    except Exception as e:
        handle_error(e)
        raise typer.Exit(1)

    try:
        offers = FlightSearchService(client, config.settings).search_offers(query)
        console.print(f"[dim]Found {len(offers)} offers[/dim]")
        print_offers(offers, output, title=f"{query.origin} → {query.destination} ({query.date})")
    except ProxyError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()


@app.command("hotels")
def search_hotels(
    city: Annotated[str, typer.Option("--city", "-c", help="City IATA code")] = ...,
    output: Annotated[OutputFormat, typer.Option("--output", "-o", help="Output format")] = OutputFormat.TABLE,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
) -> None:
    """List hotels in a city."""
    try:
        body = HotelSearchRequest(city_code=city)
    except ValidationError as e:
        console.print(f"[red]Invalid search:[/red] {_validation_message(e)}")
        raise typer.Exit(2)

    try:
        config, client = _build_client(verbose)
    except Exception as e:
        handle_error(e)
        raise typer.Exit(1)

    try:
        payload = HotelService(client, config.settings).by_city(body.city_code)
        hotels = payload.get("data") or []
        console.print(f"[dim]Found {len(hotels)} hotels[/dim]")
        print_hotels(payload, output, city_code=body.city_code)
    except ProxyError as e:
        handle_error(e)
        raise typer.Exit(1)
    finally:
        client.close()
