"""Per-user watchlist storage.

Redis Key Schema:
- tickrtime:watchlist:{user_id} - Hash of symbol -> added_at (ISO timestamp)
- tickrtime:watchlist:{user_id}:updated - ISO timestamp of the last change
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from tickrtime.core.constants import WATCHLIST_KEY_PREFIX
from tickrtime.core.logging import get_logger
from tickrtime.core.symbols import normalize_symbol

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = get_logger(__name__)


@dataclass
class WatchlistItem:
    symbol: str
    added_at: datetime


@dataclass
class Watchlist:
    user_id: str
    tickers: list[WatchlistItem] = field(default_factory=list)
    last_updated: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def symbols(self) -> list[str]:
        return [t.symbol for t in self.tickers]

    def to_api(self) -> dict[str, Any]:
        return {
            "tickers": [
                {"symbol": t.symbol, "addedAt": t.added_at.isoformat()} for t in self.tickers
            ],
            "lastUpdated": self.last_updated.isoformat(),
        }


class WatchlistStore:
    """Manage per-user ticker watchlists in Redis."""

    def __init__(self, redis: Redis) -> None:
        self.redis = redis

    @staticmethod
    def _key(user_id: str) -> str:
        return f"{WATCHLIST_KEY_PREFIX}{user_id}"

    async def get(self, user_id: str) -> Watchlist:
        """Load a watchlist, oldest entry first. Missing watchlists are empty."""
        key = self._key(user_id)
        entries: dict[str, str] = await self.redis.hgetall(key)  # type: ignore[misc]
        updated = await self.redis.get(f"{key}:updated")

        items = [
            WatchlistItem(symbol=symbol, added_at=datetime.fromisoformat(added_at))
            for symbol, added_at in entries.items()
        ]
        items.sort(key=lambda i: (i.added_at, i.symbol))

        watchlist = Watchlist(user_id=user_id, tickers=items)
        if updated:
            watchlist.last_updated = datetime.fromisoformat(updated)
        return watchlist

    async def add(self, user_id: str, symbol: str) -> tuple[Watchlist, bool]:
        """Add a symbol (normalized). Re-adding keeps the original timestamp.

        Returns:
            Tuple of (updated watchlist, True if the symbol was newly added)
        """
        symbol = normalize_symbol(symbol)
        key = self._key(user_id)
        now = datetime.now(UTC).isoformat()

        added = bool(await self.redis.hsetnx(key, symbol, now))  # type: ignore[misc]
        if added:
            await self.redis.set(f"{key}:updated", now)
            logger.info("Ticker added to watchlist", user_id=user_id, ticker=symbol)
        return await self.get(user_id), added

    async def remove(self, user_id: str, symbol: str) -> tuple[Watchlist, bool]:
        """Remove a symbol.

        Returns:
            Tuple of (updated watchlist, True if the symbol was present)
        """
        symbol = normalize_symbol(symbol)
        key = self._key(user_id)

        removed = bool(await self.redis.hdel(key, symbol))  # type: ignore[misc]
        if removed:
            await self.redis.set(f"{key}:updated", datetime.now(UTC).isoformat())
            logger.info("Ticker removed from watchlist", user_id=user_id, ticker=symbol)
        return await self.get(user_id), removed

    async def delete(self, user_id: str) -> None:
        """Drop a user's watchlist entirely."""
        key = self._key(user_id)
        await self.redis.delete(key, f"{key}:updated")
