"""Finnhub REST client.

Endpoints used:
    /calendar/earnings  -> get_earnings_calendar(), get_earnings_calendar_range()
    /stock/earnings     -> get_symbol_earnings()
    /stock/symbol       -> get_exchange_symbols()
    /stock/profile2     -> get_company_profile()

The calendar endpoint drops rows for ranges that cross a month boundary, so
range queries are split into month-bounded sub-ranges fetched concurrently.
"""

from __future__ import annotations

import asyncio
from datetime import date
from typing import Any

import httpx
import orjson
from pydantic import ValidationError

from tickrtime.core.constants import DEFAULT_FINNHUB_API_URL
from tickrtime.core.dates import DateRange, split_into_month_ranges
from tickrtime.core.exceptions import (
    AllSubRangesFailedError,
    ConfigurationError,
    MalformedResponseError,
    ProviderError,
    UpstreamFetchError,
)
from tickrtime.core.logging import get_logger
from tickrtime.core.symbols import normalize_symbol
from tickrtime.processing.earnings.models import EarningsRecord
from tickrtime.providers.finnhub.models import CompanyProfile, ExchangeSymbol, SymbolEarnings

logger = get_logger(__name__)


class FinnhubClient:
    """Async client for the Finnhub REST API.

    Usage:
        client = FinnhubClient(api_key="your_key")
        batches = await client.get_earnings_calendar_range(date(2024, 12, 15), date(2025, 1, 14))
        await client.close()
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str = DEFAULT_FINNHUB_API_URL,
        timeout: float = 30.0,
        max_concurrency: int = 4,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._max_concurrency = max_concurrency
        self._http_client: httpx.AsyncClient | None = None

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    def _require_key(self) -> str:
        if not self._api_key:
            logger.error("FINNHUB_API_KEY environment variable is not set")
            raise ConfigurationError("API configuration error")
        return self._api_key

    def _get_http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self._timeout,
                headers={"Accept": "application/json"},
            )
        return self._http_client

    async def _get(self, endpoint: str, params: dict[str, str]) -> Any:
        """GET a Finnhub endpoint and decode the JSON body.

        Raises:
            ConfigurationError: if no API key is configured
            UpstreamFetchError: on non-2xx status or network failure
            MalformedResponseError: if the body is not valid JSON
        """
        token = self._require_key()
        client = self._get_http_client()
        url = f"{self._base_url}{endpoint}"

        try:
            response = await client.get(url, params={**params, "token": token})
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Finnhub API error",
                endpoint=endpoint,
                status=e.response.status_code,
            )
            raise UpstreamFetchError(
                f"Finnhub {endpoint} returned {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.warning("Finnhub API request failed", endpoint=endpoint, error=str(e))
            raise UpstreamFetchError(f"Finnhub {endpoint} request failed: {e}") from e

        try:
            return orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise MalformedResponseError(f"Finnhub {endpoint} returned invalid JSON") from e

    # ─────────────────────────────────────────────────────────────
    # Earnings calendar
    # ─────────────────────────────────────────────────────────────

    async def get_earnings_calendar(
        self,
        start: date,
        end: date,
        symbol: str | None = None,
    ) -> list[EarningsRecord]:
        """Fetch the earnings calendar for ``[start, end]`` in a single request.

        Rows that fail validation are skipped.

        Raises:
            UpstreamFetchError: on non-2xx status or network failure
            MalformedResponseError: if ``earningsCalendar`` is missing or not a list
        """
        params = {"from": start.isoformat(), "to": end.isoformat()}
        if symbol:
            params["symbol"] = normalize_symbol(symbol)

        data = await self._get("/calendar/earnings", params)
        if not isinstance(data, dict):
            raise MalformedResponseError("Calendar response is not a JSON object")
        rows = data.get("earningsCalendar")
        if not isinstance(rows, list):
            raise MalformedResponseError("Calendar response has no earningsCalendar array")

        records: list[EarningsRecord] = []
        skipped = 0
        for row in rows:
            try:
                records.append(EarningsRecord.model_validate(row))
            except ValidationError:
                skipped += 1
        if skipped:
            logger.debug("Skipped malformed calendar rows", skipped=skipped, **params)

        logger.debug("Fetched earnings calendar", count=len(records), **params)
        return records

    async def get_earnings_calendar_range(
        self,
        start: date,
        end: date,
        symbol: str | None = None,
    ) -> list[list[EarningsRecord]]:
        """Fetch the calendar one month-bounded sub-range at a time.

        Sub-ranges are fetched concurrently. A failing sub-range contributes an
        empty batch and is logged.

        Returns:
            One batch per sub-range, in sub-range order

        Raises:
            ConfigurationError: if no API key is configured
            AllSubRangesFailedError: if every sub-range failed
        """
        self._require_key()
        sub_ranges = split_into_month_ranges(start, end)
        if not sub_ranges:
            return []

        sem = asyncio.Semaphore(self._max_concurrency)

        async def _fetch(sub_range: DateRange) -> list[EarningsRecord] | None:
            async with sem:
                try:
                    return await self.get_earnings_calendar(
                        sub_range.start, sub_range.end, symbol=symbol
                    )
                except ProviderError as e:
                    logger.error(
                        "Finnhub fetch failed for sub-range",
                        start=sub_range.start.isoformat(),
                        end=sub_range.end.isoformat(),
                        error=e.message,
                    )
                    return None

        results = await asyncio.gather(*(_fetch(r) for r in sub_ranges))

        if all(batch is None for batch in results):
            raise AllSubRangesFailedError(start, end, attempts=len(sub_ranges))

        return [batch or [] for batch in results]

    # ─────────────────────────────────────────────────────────────
    # Per-symbol earnings history
    # ─────────────────────────────────────────────────────────────

    async def get_symbol_earnings(self, symbol: str) -> list[SymbolEarnings]:
        """Quarterly earnings history for one symbol (most recent first)."""
        symbol = normalize_symbol(symbol)
        data = await self._get("/stock/earnings", {"symbol": symbol})
        if data is None:
            return []
        if not isinstance(data, list):
            raise MalformedResponseError("Symbol earnings response is not a JSON array")

        results: list[SymbolEarnings] = []
        for row in data:
            if isinstance(row, dict):
                row = {"symbol": symbol, **{k: v for k, v in row.items() if v is not None}}
            try:
                results.append(SymbolEarnings.model_validate(row))
            except ValidationError:
                logger.debug("Skipped malformed earnings row", symbol=symbol)
        return results

    # ─────────────────────────────────────────────────────────────
    # Ticker universe
    # ─────────────────────────────────────────────────────────────

    async def get_exchange_symbols(self, mic: str) -> list[ExchangeSymbol]:
        """All US listings on the exchange identified by ``mic`` (e.g. XNAS)."""
        data = await self._get("/stock/symbol", {"exchange": "US", "mic": mic})
        if not isinstance(data, list):
            raise MalformedResponseError("Symbol list response is not a JSON array")

        symbols: list[ExchangeSymbol] = []
        for row in data:
            try:
                symbols.append(ExchangeSymbol.model_validate(row))
            except ValidationError:
                continue
        return symbols

    async def get_company_profile(self, symbol: str) -> CompanyProfile | None:
        """Company profile, or None when unavailable."""
        try:
            data = await self._get("/stock/profile2", {"symbol": normalize_symbol(symbol)})
        except ProviderError:
            return None
        if not isinstance(data, dict) or not data:
            return None
        try:
            return CompanyProfile.model_validate(data)
        except ValidationError:
            return None

    # ─────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────

    async def close(self) -> None:
        """Clean up resources."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None
        logger.debug("FinnhubClient closed")
