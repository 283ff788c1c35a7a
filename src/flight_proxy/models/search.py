"""Inbound search request models.

Validation happens here, before any provider call is made.
"""

from __future__ import annotations

import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator


def _clean_code(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().upper()
    return value


class SearchRequest(BaseModel):
    """Validated flight search query."""
    origin: str = Field(min_length=3, max_length=3, pattern=r"^[A-Z]{3}$")
    destination: str = Field(min_length=3, max_length=3, pattern=r"^[A-Z]{3}$")
    date: str = Field(pattern=r"^\d{4}-\d{2}-\d{2}$")
    adults: int = Field(ge=1, le=9)
    preferred_airlines: list[str] | None = Field(default=None, alias="preferredAirlines")
    stops: int | None = Field(default=None, ge=0, le=3)
    min_price: float | None = Field(default=None, ge=0, alias="minPrice")
    max_price: float | None = Field(default=None, ge=0, alias="maxPrice")

    model_config = {"populate_by_name": True}

    @field_validator("origin", "destination", mode="before")
    @classmethod
    def _normalize_location(cls, value: Any) -> Any:
        return _clean_code(value)

    @field_validator("date")
    @classmethod
    def _calendar_date(cls, value: str) -> str:
        try:
            datetime.date.fromisoformat(value)
        except ValueError:
            raise ValueError("must be a valid calendar date")
        return value

    @field_validator("preferred_airlines", mode="before")
    @classmethod
    def _normalize_airlines(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [_clean_code(code) for code in value]
        return value

    @field_validator("preferred_airlines")
    @classmethod
    def _two_letter_airlines(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return value
        bad = [code for code in value if len(code) != 2]
        if bad:
            raise ValueError(f"airline codes must be 2 characters: {', '.join(bad)}")
        return value

    @model_validator(mode="after")
    def _price_range(self) -> SearchRequest:
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValueError("minPrice must be less than or equal to maxPrice")
        return self

    @property
    def airlines(self) -> list[str]:
        """Preferred carrier codes, empty when none were requested."""
        return self.preferred_airlines or []


class HotelSearchRequest(BaseModel):
    city_code: str = Field(alias="cityCode")

    model_config = {"populate_by_name": True}

    @field_validator("city_code", mode="before")
    @classmethod
    def _three_characters(cls, value: Any) -> Any:
        if not isinstance(value, str) or len(value) != 3:
            raise ValueError("cityCode must be a 3-letter IATA code")
        return value.upper()
