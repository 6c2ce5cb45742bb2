"""Earnings queries behind the /api/earnings routes.

Combines Finnhub calendar data with the stored ticker universe: results are
restricted to active tracked symbols and annotated with their metadata.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from datetime import date, timedelta
from typing import TYPE_CHECKING

from tickrtime.core.constants import LOOKAHEAD_DAYS, LOOKBACK_DAYS
from tickrtime.core.dates import today
from tickrtime.core.exceptions import ProviderError, RequestValidationError
from tickrtime.core.logging import get_logger
from tickrtime.core.symbols import normalize_symbol
from tickrtime.processing.earnings.calculations import calculate_surprise
from tickrtime.processing.earnings.models import (
    EnrichedEarningsRecord,
    SortOrder,
    WatchlistEarning,
)
from tickrtime.processing.earnings.reconcile import reconcile

if TYPE_CHECKING:
    from tickrtime.providers.finnhub import FinnhubClient, SymbolEarnings
    from tickrtime.storage.tickers import Ticker, TickerStore

logger = get_logger(__name__)


class EarningsService:
    """Earnings calendar queries for tracked tickers.

    Usage:
        service = EarningsService(client=finnhub_client, tickers=TickerStore(redis))
        records = await service.get_range(date(2024, 12, 15), date(2025, 1, 14))
    """

    def __init__(
        self,
        client: FinnhubClient,
        tickers: TickerStore,
        max_concurrency: int = 4,
    ) -> None:
        self._client = client
        self._tickers = tickers
        self._max_concurrency = max_concurrency

    async def _load_universe(self) -> tuple[set[str], dict[str, Ticker]]:
        active, metadata = await asyncio.gather(
            self._tickers.get_active_symbols(),
            self._tickers.get_metadata_map(),
        )
        return active, metadata

    async def _restrict_to_tracked(
        self,
        records: Iterable[EnrichedEarningsRecord],
    ) -> list[EnrichedEarningsRecord]:
        """Keep active tracked symbols and attach their metadata.

        An empty universe (before the first ticker sync) applies no filter.
        """
        active, metadata = await self._load_universe()
        if not active:
            logger.warning("Ticker universe is empty, returning unfiltered earnings")

        result: list[EnrichedEarningsRecord] = []
        for record in records:
            symbol = normalize_symbol(record.symbol)
            if active and symbol not in active:
                continue
            ticker = metadata.get(symbol)
            if ticker is not None:
                record = record.model_copy(
                    update={
                        "exchange": ticker.exchange,
                        "description": ticker.description,
                        "industry": ticker.industry,
                        "sector": ticker.sector,
                    }
                )
            result.append(record)
        return result

    async def get_range(
        self,
        start: date,
        end: date,
        order: SortOrder = SortOrder.ASC,
    ) -> list[EnrichedEarningsRecord]:
        """Merged, deduplicated, enriched earnings for ``[start, end]``.

        Raises:
            RequestValidationError: if ``start`` is after ``end``
            ConfigurationError: if no Finnhub API key is configured
            AllSubRangesFailedError: if every month sub-range failed
        """
        if start > end:
            raise RequestValidationError("start must be on or before end")

        batches = await self._client.get_earnings_calendar_range(start, end)
        records = reconcile(batches, start, end, order)
        result = await self._restrict_to_tracked(records)
        logger.debug(
            "Earnings range resolved",
            start=start.isoformat(),
            end=end.isoformat(),
            sub_ranges=len(batches),
            count=len(result),
        )
        return result

    async def get_day(self, day: date) -> list[EnrichedEarningsRecord]:
        """Earnings for a single day, sorted by symbol."""
        records = await self._client.get_earnings_calendar(day, day)
        result = await self._restrict_to_tracked(reconcile([records], day, day))
        return sorted(result, key=lambda r: r.symbol)

    async def get_next_30_days(self) -> list[EnrichedEarningsRecord]:
        start = today()
        return await self.get_range(start, start + timedelta(days=LOOKAHEAD_DAYS), SortOrder.ASC)

    async def get_previous_30_days(self) -> list[EnrichedEarningsRecord]:
        now = today()
        return await self.get_range(
            now - timedelta(days=LOOKBACK_DAYS),
            now - timedelta(days=1),
            SortOrder.DESC,
        )

    async def search_by_symbol(
        self,
        symbol: str,
        year: int | None = None,
        quarter: int | None = None,
    ) -> list[EnrichedEarningsRecord]:
        """Reported quarterly history for one symbol, optionally filtered."""
        history = await self._client.get_symbol_earnings(symbol)
        if year is not None:
            history = [e for e in history if e.year == year]
        if quarter is not None:
            history = [e for e in history if e.quarter == quarter]

        metadata = await self._tickers.get(symbol)
        return [
            _history_to_record(e, e.period, metadata) for e in history if e.period is not None
        ]

    async def get_watchlist_earnings(self, symbols: Iterable[str]) -> list[WatchlistEarning]:
        """Next upcoming report for each symbol.

        Symbols with nothing scheduled (or whose lookup failed) get an all-null
        entry. Dated entries come first in date order.
        """
        unique = list(dict.fromkeys(normalize_symbol(s) for s in symbols if s.strip()))
        if not unique:
            return []

        start = today()
        end = date(start.year + 1, 12, 31)
        sem = asyncio.Semaphore(self._max_concurrency)

        async def _next_for(symbol: str) -> WatchlistEarning:
            async with sem:
                try:
                    records = await self._client.get_earnings_calendar(start, end, symbol=symbol)
                except ProviderError as e:
                    logger.error(
                        "Error fetching earnings for symbol", symbol=symbol, error=e.message
                    )
                    records = []

            upcoming = sorted(
                (r for r in records if r.symbol == symbol and r.date >= start),
                key=lambda r: r.date,
            )
            if not upcoming:
                return WatchlistEarning(symbol=symbol)

            nxt = upcoming[0]
            surprise = calculate_surprise(nxt.actual, nxt.estimate)
            return WatchlistEarning(
                symbol=symbol,
                date=nxt.date,
                quarter=nxt.quarter,
                year=nxt.year,
                estimate=nxt.estimate,
                actual=nxt.actual,
                surprise=surprise.surprise,
                surprise_percent=surprise.surprise_percent,
                hour=nxt.hour,
            )

        results = await asyncio.gather(*(_next_for(s) for s in unique))
        return sorted(results, key=lambda e: (e.date is None, e.date or start))


def _history_to_record(
    entry: SymbolEarnings,
    period: date,
    ticker: Ticker | None,
) -> EnrichedEarningsRecord:
    return EnrichedEarningsRecord(
        symbol=entry.symbol,
        date=period,
        actual=entry.actual,
        estimate=entry.estimate,
        quarter=entry.quarter,
        year=entry.year,
        surprise=entry.surprise,
        surprise_percent=entry.surprise_percent,
        exchange=ticker.exchange if ticker else None,
        description=ticker.description if ticker else None,
        industry=ticker.industry if ticker else None,
        sector=ticker.sector if ticker else None,
    )
