"""Normalized flight offer returned to the frontend."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SegmentDetail(BaseModel):
    airline: str
    flight_number: str = Field(alias="flightNumber")
    departure_airport: str = Field(alias="departureAirport")
    departure_time: str = Field(alias="departureTime")
    arrival_airport: str = Field(alias="arrivalAirport")
    arrival_time: str = Field(alias="arrivalTime")
    duration: str | None = None  # provider format, e.g. PT2H10M

    model_config = {"populate_by_name": True}


class NormalizedOffer(BaseModel):
    airline: str
    flight_number: str = Field(alias="flightNumber")
    departure_airport: str = Field(alias="departureAirport")
    departure_time: str = Field(alias="departureTime")
    arrival_airport: str = Field(alias="arrivalAirport")
    arrival_time: str = Field(alias="arrivalTime")
    duration: str  # lower-cased, PT prefix stripped, e.g. 5h30m
    price: str  # "<total> <currency>"
    stops: int
    segments: list[SegmentDetail]

    model_config = {"populate_by_name": True}
