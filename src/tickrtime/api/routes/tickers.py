"""Ticker universe endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query

from tickrtime.core.dependencies import TickerStoreDep
from tickrtime.core.exceptions import NotFoundError
from tickrtime.core.symbols import normalize_symbol

router = APIRouter()


@router.get("/")
async def list_tickers(
    store: TickerStoreDep,
    sector: str | None = Query(None, description="Exact sector name"),
    search: str | None = Query(None, description="Substring of symbol or company name"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
) -> dict[str, Any]:
    page, total = await store.list_tickers(sector=sector, search=search, limit=limit, offset=offset)
    return {
        "tickers": [t.to_api() for t in page],
        "total": total,
        "limit": limit,
        "offset": offset,
    }


@router.get("/sectors")
async def list_sectors(store: TickerStoreDep) -> dict[str, list[str]]:
    return {"sectors": await store.distinct_sectors()}


@router.get("/{symbol}")
async def get_ticker(symbol: str, store: TickerStoreDep) -> dict[str, Any]:
    ticker = await store.get(symbol)
    if ticker is None:
        raise NotFoundError(f"Ticker '{normalize_symbol(symbol)}' not found")
    return ticker.to_api()
