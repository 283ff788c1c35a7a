"""Rendering of offers, hotels and token status for the CLI.

JSON goes to stdout so it can be piped; tables go to stderr through rich.
"""

from __future__ import annotations

import json
import sys
from enum import Enum
from typing import Any

from rich.console import Console
from rich.table import Table

from flight_proxy.models.offers import NormalizedOffer

console = Console(stderr=True)


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"


def print_json(data: Any) -> None:
    """Print data as formatted JSON to stdout."""
    json.dump(data, sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")


def format_stops(stops: int) -> str:
    if stops == 0:
        return "nonstop"
    return f"{stops} stop" if stops == 1 else f"{stops} stops"


def format_route(offer: NormalizedOffer) -> str:
    """CDG → FRA → JFK, following the segments when there are any."""
    if not offer.segments:
        return f"{offer.departure_airport} → {offer.arrival_airport}"
    airports = [offer.segments[0].departure_airport]
    airports.extend(segment.arrival_airport for segment in offer.segments)
    return " → ".join(airports)


def offer_row(offer: NormalizedOffer) -> dict[str, str]:
    """Flatten one offer into the cells of the offers table."""
    return {
        "Flight": f"{offer.airline} {offer.flight_number}",
        "Route": format_route(offer),
        "Departs": offer.departure_time,
        "Arrives": offer.arrival_time,
        "Duration": offer.duration,
        "Stops": format_stops(offer.stops),
        "Segments": str(len(offer.segments)),
        "Price": offer.price,
    }


def print_offers(
    offers: list[NormalizedOffer],
    fmt: OutputFormat = OutputFormat.TABLE,
    title: str | None = None,
) -> None:
    """Print flight offers as JSON (frontend shape) or as a table."""
    if fmt == OutputFormat.JSON:
        print_json([offer.model_dump(by_alias=True) for offer in offers])
        return

    if not offers:
        console.print("[dim]No offers matched.[/dim]")
        return

    table = Table(title=title)
    for name in offer_row(offers[0]):
        if name in ("Price", "Segments"):
            table.add_column(name, justify="right")
        else:
            table.add_column(name, overflow="fold")

    for offer in offers:
        table.add_row(*offer_row(offer).values())

    console.print(table)


def print_hotels(
    payload: dict[str, Any],
    fmt: OutputFormat = OutputFormat.TABLE,
    city_code: str | None = None,
) -> None:
    """Print a hotel list. JSON mode prints the provider payload unchanged."""
    if fmt == OutputFormat.JSON:
        print_json(payload)
        return

    hotels = payload.get("data") or []
    if not hotels:
        console.print("[dim]No hotels found.[/dim]")
        return

    table = Table(title=f"Hotels ({city_code})" if city_code else "Hotels")
    table.add_column("Hotel ID")
    table.add_column("Name", overflow="fold")
    table.add_column("City")
    for hotel in hotels:
        table.add_row(
            str(hotel.get("hotelId", "")),
            str(hotel.get("name", "")),
            str(hotel.get("iataCode", "")),
        )

    console.print(table)


def print_token_status(
    result: dict[str, Any],
    fmt: OutputFormat = OutputFormat.TABLE,
    title: str | None = None,
) -> None:
    """Print a token check result as JSON or a two-column table."""
    if fmt == OutputFormat.JSON:
        print_json(result)
        return

    table = Table(title=title, show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for key, value in result.items():
        table.add_row(key.replace("_", " "), str(value))

    console.print(table)
