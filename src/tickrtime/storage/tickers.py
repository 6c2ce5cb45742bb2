"""Ticker universe storage.

Redis Key Schema:
- tickrtime:ticker:{SYMBOL} - Hash with description, exchange, industry, sector, ...
- tickrtime:tickers:all - Set of every symbol ever synced
- tickrtime:tickers:active - Set of currently listed symbols
- tickrtime:tickers:unenriched - Set of symbols still missing profile data

Symbols are always stored normalized (trimmed, uppercase).
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from tickrtime.core.constants import (
    TICKER_KEY_PREFIX,
    TICKERS_ACTIVE_KEY,
    TICKERS_ALL_KEY,
    TICKERS_UNENRICHED_KEY,
)
from tickrtime.core.logging import get_logger
from tickrtime.core.symbols import normalize_symbol

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = get_logger(__name__)


class Ticker(BaseModel):
    """A listed symbol and its profile metadata."""

    symbol: str
    description: str | None = None
    exchange: str | None = None
    industry: str | None = None
    sector: str | None = None
    is_active: bool = True
    profile_fetched_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_hash(self) -> dict[str, str]:
        """Convert to Redis hash-compatible dict (all string values)."""
        return {
            "symbol": self.symbol,
            "description": self.description or "",
            "exchange": self.exchange or "",
            "industry": self.industry or "",
            "sector": self.sector or "",
            "is_active": "1" if self.is_active else "0",
            "profile_fetched_at": self.profile_fetched_at.isoformat()
            if self.profile_fetched_at
            else "",
            "created_at": self.created_at.isoformat() if self.created_at else "",
            "updated_at": self.updated_at.isoformat() if self.updated_at else "",
        }

    @classmethod
    def from_hash(cls, data: dict[str, str]) -> Ticker:
        """Create from a Redis hash; empty strings become None."""
        return cls(
            symbol=data["symbol"],
            description=data.get("description") or None,
            exchange=data.get("exchange") or None,
            industry=data.get("industry") or None,
            sector=data.get("sector") or None,
            is_active=data.get("is_active", "1") == "1",
            profile_fetched_at=data.get("profile_fetched_at") or None,
            created_at=data.get("created_at") or None,
            updated_at=data.get("updated_at") or None,
        )

    def to_api(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "description": self.description,
            "exchange": self.exchange,
            "industry": self.industry,
            "sector": self.sector,
            "isActive": self.is_active,
            "profileFetchedAt": self.profile_fetched_at.isoformat()
            if self.profile_fetched_at
            else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


def _ticker_key(symbol: str) -> str:
    return f"{TICKER_KEY_PREFIX}{symbol}"


class TickerStore:
    """Redis-backed store for the tracked ticker universe."""

    def __init__(self, redis: Redis) -> None:
        self.redis = redis

    async def get_active_symbols(self) -> set[str]:
        members = await self.redis.smembers(TICKERS_ACTIVE_KEY)  # type: ignore[misc]
        return {normalize_symbol(m) for m in members}

    async def get(self, symbol: str) -> Ticker | None:
        data = await self.redis.hgetall(_ticker_key(normalize_symbol(symbol)))  # type: ignore[misc]
        if not data:
            return None
        return Ticker.from_hash(data)

    async def _get_many(self, symbols: list[str]) -> list[Ticker]:
        if not symbols:
            return []
        async with self.redis.pipeline(transaction=False) as pipe:
            for symbol in symbols:
                pipe.hgetall(_ticker_key(symbol))
            rows: list[dict[str, str]] = await pipe.execute()
        return [Ticker.from_hash(row) for row in rows if row]

    async def get_metadata_map(self) -> dict[str, Ticker]:
        """All active tickers keyed by symbol."""
        symbols = sorted(await self.get_active_symbols())
        tickers = await self._get_many(symbols)
        return {t.symbol: t for t in tickers}

    async def upsert(
        self,
        symbol: str,
        description: str | None,
        exchange: str | None,
        is_active: bool = True,
    ) -> bool:
        """Insert or update a listing. Returns True if the symbol was new."""
        symbol = normalize_symbol(symbol)
        key = _ticker_key(symbol)
        now = datetime.now(UTC)

        is_new = not await self.redis.exists(key)
        if is_new:
            ticker = Ticker(
                symbol=symbol,
                description=description,
                exchange=exchange,
                is_active=is_active,
                created_at=now,
                updated_at=now,
            )
            await self.redis.hset(key, mapping=ticker.to_hash())  # type: ignore[misc]
            await self.redis.sadd(TICKERS_UNENRICHED_KEY, symbol)  # type: ignore[misc]
        else:
            await self.redis.hset(  # type: ignore[misc]
                key,
                mapping={
                    "description": description or "",
                    "exchange": exchange or "",
                    "is_active": "1" if is_active else "0",
                    "updated_at": now.isoformat(),
                },
            )

        await self.redis.sadd(TICKERS_ALL_KEY, symbol)  # type: ignore[misc]
        if is_active:
            await self.redis.sadd(TICKERS_ACTIVE_KEY, symbol)  # type: ignore[misc]
        else:
            await self.redis.srem(TICKERS_ACTIVE_KEY, symbol)  # type: ignore[misc]
        return is_new

    async def mark_inactive(self, symbol: str) -> bool:
        """Flag a delisted symbol. Returns False if the symbol is unknown."""
        symbol = normalize_symbol(symbol)
        key = _ticker_key(symbol)
        if not await self.redis.exists(key):
            return False
        await self.redis.hset(  # type: ignore[misc]
            key,
            mapping={"is_active": "0", "updated_at": datetime.now(UTC).isoformat()},
        )
        await self.redis.srem(TICKERS_ACTIVE_KEY, symbol)  # type: ignore[misc]
        await self.redis.srem(TICKERS_UNENRICHED_KEY, symbol)  # type: ignore[misc]
        return True

    async def get_unenriched(self, limit: int = 50) -> list[Ticker]:
        """Active tickers still missing profile data, alphabetically."""
        if limit <= 0:
            return []
        members = await self.redis.smembers(TICKERS_UNENRICHED_KEY)  # type: ignore[misc]
        tickers = await self._get_many(sorted(members))
        return [t for t in tickers if t.is_active][:limit]

    async def update_profile(
        self,
        symbol: str,
        industry: str | None,
        sector: str | None,
    ) -> None:
        symbol = normalize_symbol(symbol)
        now = datetime.now(UTC).isoformat()
        await self.redis.hset(  # type: ignore[misc]
            _ticker_key(symbol),
            mapping={
                "industry": industry or "",
                "sector": sector or "",
                "profile_fetched_at": now,
                "updated_at": now,
            },
        )
        await self.redis.srem(TICKERS_UNENRICHED_KEY, symbol)  # type: ignore[misc]

    async def list_tickers(
        self,
        sector: str | None = None,
        search: str | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[Ticker], int]:
        """Filter active tickers by sector and symbol/description substring.

        Returns:
            Tuple of (page of tickers sorted by symbol, total matches)
        """
        tickers = list((await self.get_metadata_map()).values())
        if sector:
            tickers = [t for t in tickers if t.sector == sector]
        if search:
            needle = search.strip().lower()
            tickers = [
                t
                for t in tickers
                if needle in t.symbol.lower() or needle in (t.description or "").lower()
            ]
        tickers.sort(key=lambda t: t.symbol)
        return tickers[offset : offset + limit], len(tickers)

    async def distinct_sectors(self) -> list[str]:
        tickers = (await self.get_metadata_map()).values()
        return sorted({t.sector for t in tickers if t.sector})

    async def count(self) -> int:
        result: int = await self.redis.scard(TICKERS_ACTIVE_KEY)  # type: ignore[misc]
        return result
