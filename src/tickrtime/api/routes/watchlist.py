"""Per-user watchlist endpoints (Bearer token required)."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query
from pydantic import BaseModel

from tickrtime.core.dependencies import CurrentUserDep, WatchlistStoreDep
from tickrtime.core.exceptions import NotFoundError, RequestValidationError
from tickrtime.core.symbols import normalize_symbol
from tickrtime.storage.watchlist import Watchlist

router = APIRouter()


class AddTickerRequest(BaseModel):
    symbol: str = ""


def _response(watchlist: Watchlist, message: str) -> dict[str, Any]:
    return {
        "success": True,
        "message": message,
        "watchlist": watchlist.to_api(),
        "tickers": watchlist.symbols,
    }


@router.get("/")
async def get_watchlist(user: CurrentUserDep, store: WatchlistStoreDep) -> dict[str, Any]:
    return _response(await store.get(user.id), "Watchlist retrieved successfully")


@router.post("/")
async def add_ticker(
    body: AddTickerRequest,
    user: CurrentUserDep,
    store: WatchlistStoreDep,
) -> dict[str, Any]:
    if not body.symbol.strip():
        raise RequestValidationError("Symbol is required")
    symbol = normalize_symbol(body.symbol)
    watchlist, added = await store.add(user.id, symbol)
    message = f"{symbol} added to watchlist" if added else f"{symbol} is already in watchlist"
    return _response(watchlist, message)


@router.delete("/")
async def remove_ticker(
    user: CurrentUserDep,
    store: WatchlistStoreDep,
    symbol: str | None = Query(None, description="Ticker symbol to remove"),
) -> dict[str, Any]:
    if not symbol or not symbol.strip():
        raise RequestValidationError("Symbol is required")
    symbol = normalize_symbol(symbol)
    watchlist, removed = await store.remove(user.id, symbol)
    if not removed:
        raise NotFoundError(f"{symbol} is not in watchlist")
    return _response(watchlist, f"{symbol} removed from watchlist")
