"""Pydantic models for Finnhub responses other than the earnings calendar."""

from __future__ import annotations

from datetime import date as Date
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from tickrtime.core.symbols import normalize_symbol
from tickrtime.processing.earnings.calculations import parse_eps


class SymbolEarnings(BaseModel):
    """One quarter of reported earnings from ``/stock/earnings``.

    Finnhub computes surprise itself on this endpoint and reports the fiscal
    period end rather than the announcement date.
    """

    model_config = ConfigDict(populate_by_name=True)

    symbol: str
    period: Date | None = None
    quarter: int | None = None
    year: int | None = None
    actual: float | None = None
    estimate: float | None = None
    surprise: float | None = None
    surprise_percent: float | None = Field(
        default=None, validation_alias=AliasChoices("surprisePercent", "surprise_percent")
    )

    @field_validator("symbol", mode="before")
    @classmethod
    def normalize_symbol_field(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("symbol must be a non-empty string")
        return normalize_symbol(v)

    @field_validator("period", mode="before")
    @classmethod
    def blank_period_to_none(cls, v: Any) -> Any:
        return v or None

    @field_validator("actual", "estimate", "surprise", "surprise_percent", mode="before")
    @classmethod
    def coerce_number(cls, v: Any) -> float | None:
        return parse_eps(v)


class ExchangeSymbol(BaseModel):
    """Listing from ``/stock/symbol``."""

    model_config = ConfigDict(populate_by_name=True)

    symbol: str
    description: str = ""
    display_symbol: str | None = Field(default=None, alias="displaySymbol")
    type: str = ""

    @field_validator("symbol", mode="before")
    @classmethod
    def normalize_symbol_field(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("symbol must be a non-empty string")
        return normalize_symbol(v)

    @field_validator("description", "type", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> str:
        return v or ""


class CompanyProfile(BaseModel):
    """Subset of ``/stock/profile2`` used for enrichment."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    country: str | None = None
    exchange: str | None = None
    industry: str | None = Field(default=None, alias="finnhubIndustry")

    @field_validator("industry", mode="before")
    @classmethod
    def blank_industry_to_none(cls, v: Any) -> str | None:
        return v or None
