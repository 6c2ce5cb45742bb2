"""Earnings calendar API endpoints (Finnhub data)."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any

from fastapi import APIRouter, Query

from tickrtime.core.dates import today
from tickrtime.core.dependencies import EarningsServiceDep
from tickrtime.core.exceptions import RequestValidationError
from tickrtime.processing.earnings.models import EnrichedEarningsRecord, SortOrder

router = APIRouter()


def _listing(records: list[EnrichedEarningsRecord], **extra: Any) -> dict[str, Any]:
    return {
        "earnings": [r.to_api() for r in records],
        **extra,
        "totalFound": len(records),
    }


@router.get("/")
async def search_earnings(
    service: EarningsServiceDep,
    symbol: str | None = Query(None, description="Ticker symbol (e.g. AAPL)"),
    year: int | None = Query(None, description="Fiscal year filter"),
    quarter: int | None = Query(None, ge=1, le=4, description="Fiscal quarter filter"),
) -> dict[str, Any]:
    """Reported quarterly earnings history for one symbol."""
    if not symbol or not symbol.strip():
        raise RequestValidationError("Symbol parameter is required")
    records = await service.search_by_symbol(symbol, year=year, quarter=quarter)
    return _listing(records)


@router.get("/range")
async def get_earnings_range(
    service: EarningsServiceDep,
    start: date = Query(..., description="First day, inclusive (YYYY-MM-DD)"),
    end: date = Query(..., description="Last day, inclusive (YYYY-MM-DD)"),
    sort: SortOrder = Query(SortOrder.ASC, description="Sort direction by date"),
) -> list[dict[str, Any]]:
    """Merged, deduplicated earnings for an arbitrary date range."""
    records = await service.get_range(start, end, sort)
    return [r.to_api() for r in records]


@router.get("/today")
async def get_earnings_today(service: EarningsServiceDep) -> dict[str, Any]:
    day = today()
    records = await service.get_day(day)
    return _listing(records, date=day.isoformat())


@router.get("/tomorrow")
async def get_earnings_tomorrow(service: EarningsServiceDep) -> dict[str, Any]:
    day = today() + timedelta(days=1)
    records = await service.get_day(day)
    return _listing(records, date=day.isoformat())


@router.get("/next-30-days")
async def get_earnings_next_30_days(service: EarningsServiceDep) -> dict[str, Any]:
    return _listing(await service.get_next_30_days())


@router.get("/previous-30-days")
async def get_earnings_previous_30_days(service: EarningsServiceDep) -> dict[str, Any]:
    return _listing(await service.get_previous_30_days())


@router.get("/watchlist")
async def get_watchlist_earnings(
    service: EarningsServiceDep,
    symbols: str | None = Query(None, description="Comma-separated ticker symbols"),
) -> list[dict[str, Any]]:
    """Next scheduled report for each requested symbol."""
    requested = [s for s in (symbols or "").split(",") if s.strip()]
    if not requested:
        return []
    entries = await service.get_watchlist_earnings(requested)
    return [e.to_api() for e in entries]
