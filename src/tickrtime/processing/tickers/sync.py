"""Daily ticker universe sync.

Steps:
1. Fetch current listings for each configured exchange
2. Diff against stored active symbols (case-insensitive)
3. Insert new listings, mark delisted ones inactive
4. Enrich a batch of unenriched tickers with industry/sector from profiles
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from tickrtime.core.constants import (
    ENRICHMENT_BATCH_SIZE,
    ENRICHMENT_DELAY_SECONDS,
    SYNC_EXCHANGES,
)
from tickrtime.core.exceptions import ProviderError, UpstreamFetchError
from tickrtime.core.logging import get_logger
from tickrtime.core.symbols import diff_symbols
from tickrtime.processing.tickers.sectors import map_industry_to_sector

if TYPE_CHECKING:
    from tickrtime.providers.finnhub import FinnhubClient
    from tickrtime.storage.tickers import TickerStore

logger = get_logger(__name__)


@dataclass
class Listing:
    symbol: str
    description: str
    exchange: str


@dataclass
class SyncStats:
    current_symbols: int = 0
    stored_symbols: int = 0
    new_symbols: int = 0
    inserted: int = 0
    delisted_symbols: int = 0
    delisted_marked: int = 0
    unenriched_found: int = 0
    enriched: int = 0
    duration_ms: int = 0

    def to_api(self) -> dict[str, int]:
        return {
            "currentSymbols": self.current_symbols,
            "storedSymbols": self.stored_symbols,
            "newSymbols": self.new_symbols,
            "inserted": self.inserted,
            "delistedSymbols": self.delisted_symbols,
            "delistedMarked": self.delisted_marked,
            "unenrichedFound": self.unenriched_found,
            "enriched": self.enriched,
            "durationMs": self.duration_ms,
        }


class TickerSyncer:
    """Keep the stored ticker universe in line with Finnhub's exchange listings."""

    def __init__(
        self,
        client: FinnhubClient,
        store: TickerStore,
        exchanges: tuple[tuple[str, str], ...] = SYNC_EXCHANGES,
        enrichment_batch_size: int = ENRICHMENT_BATCH_SIZE,
        enrichment_delay: float = ENRICHMENT_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._client = client
        self._store = store
        self._exchanges = exchanges
        self._batch_size = enrichment_batch_size
        self._delay = enrichment_delay
        self._sleep = sleep

    async def fetch_listings(self) -> dict[str, Listing]:
        """Current listings keyed by normalized symbol.

        A failing exchange is logged and skipped.

        Raises:
            UpstreamFetchError: if no exchange returned any listings
        """
        listings: dict[str, Listing] = {}
        for mic, exchange in self._exchanges:
            try:
                symbols = await self._client.get_exchange_symbols(mic)
            except ProviderError as e:
                logger.error("Failed to fetch exchange symbols", exchange=exchange, error=e.message)
                continue
            for s in symbols:
                listings[s.symbol] = Listing(
                    symbol=s.symbol,
                    description=s.description or s.display_symbol or s.symbol,
                    exchange=exchange,
                )
            logger.info("Fetched exchange symbols", exchange=exchange, count=len(symbols))

        if not listings:
            # Diffing against an empty universe would delist every stored ticker
            raise UpstreamFetchError("No exchange listings fetched; aborting ticker sync")
        return listings

    async def enrich(self, stats: SyncStats) -> None:
        unenriched = await self._store.get_unenriched(self._batch_size)
        stats.unenriched_found = len(unenriched)

        for i, ticker in enumerate(unenriched):
            if i and self._delay:
                await self._sleep(self._delay)
            profile = await self._client.get_company_profile(ticker.symbol)
            if profile is None:
                continue
            await self._store.update_profile(
                ticker.symbol,
                industry=profile.industry,
                sector=map_industry_to_sector(profile.industry),
            )
            stats.enriched += 1

    async def run(self) -> SyncStats:
        """Run one full sync pass."""
        started = time.monotonic()
        stats = SyncStats()

        listings = await self.fetch_listings()
        stored = await self._store.get_active_symbols()
        stats.current_symbols = len(listings)
        stats.stored_symbols = len(stored)

        diff = diff_symbols(listings.keys(), stored)
        stats.new_symbols = len(diff.new)
        stats.delisted_symbols = len(diff.delisted)
        logger.info("Ticker diff computed", new=len(diff.new), delisted=len(diff.delisted))

        for symbol in diff.new:
            listing = listings[symbol]
            await self._store.upsert(listing.symbol, listing.description, listing.exchange)
            stats.inserted += 1

        for symbol in diff.delisted:
            if await self._store.mark_inactive(symbol):
                stats.delisted_marked += 1

        await self.enrich(stats)

        stats.duration_ms = int((time.monotonic() - started) * 1000)
        logger.info("Ticker sync complete", **stats.to_api())
        return stats
