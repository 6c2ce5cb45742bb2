"""Pydantic models for earnings calendar data.

``EarningsRecord`` is the validated shape of one Finnhub calendar row.
Malformed EPS values are coerced to None rather than rejected; a row without
a usable symbol or date fails validation and is skipped by the provider.
"""

from __future__ import annotations

from datetime import date as Date
from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from tickrtime.core.symbols import normalize_symbol
from tickrtime.processing.earnings.calculations import parse_eps


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


def _parse_optional_int(value: Any) -> int | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class EarningsRecord(BaseModel):
    """A single earnings calendar entry from the provider."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    symbol: str
    date: Date
    actual: float | None = Field(
        default=None, validation_alias=AliasChoices("epsActual", "actual")
    )
    estimate: float | None = Field(
        default=None, validation_alias=AliasChoices("epsEstimate", "estimate")
    )
    hour: str | None = None  # "bmo", "amc", "dmh"
    quarter: int | None = None
    year: int | None = None

    @field_validator("symbol", mode="before")
    @classmethod
    def normalize_symbol_field(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("symbol must be a non-empty string")
        return normalize_symbol(v)

    @field_validator("actual", "estimate", mode="before")
    @classmethod
    def coerce_eps(cls, v: Any) -> float | None:
        return parse_eps(v)

    @field_validator("hour", mode="before")
    @classmethod
    def blank_hour_to_none(cls, v: Any) -> str | None:
        if not isinstance(v, str) or not v.strip():
            return None
        return v.strip()

    @field_validator("quarter", "year", mode="before")
    @classmethod
    def coerce_int(cls, v: Any) -> int | None:
        return _parse_optional_int(v)


class EnrichedEarningsRecord(EarningsRecord):
    """Earnings entry with surprise metrics and optional ticker metadata."""

    surprise: float | None = None
    surprise_percent: float | None = Field(
        default=None,
        validation_alias=AliasChoices("surprisePercent", "surprise_percent"),
        serialization_alias="surprisePercent",
    )
    exchange: str | None = None
    description: str | None = None
    industry: str | None = None
    sector: str | None = None

    def to_api(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class WatchlistEarning(BaseModel):
    """Next upcoming report for a watchlist symbol (all-null when none is scheduled)."""

    model_config = ConfigDict(populate_by_name=True)

    symbol: str
    date: Date | None = None
    quarter: int | None = None
    year: int | None = None
    estimate: float | None = None
    actual: float | None = None
    surprise: float | None = None
    surprise_percent: float | None = Field(default=None, serialization_alias="surprisePercent")
    hour: str | None = None

    def to_api(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
