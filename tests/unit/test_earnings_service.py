"""Tests for EarningsService."""

from __future__ import annotations

from datetime import date
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest

from tickrtime.core.exceptions import RequestValidationError, UpstreamFetchError
from tickrtime.processing.earnings.models import EarningsRecord, SortOrder
from tickrtime.processing.earnings.service import EarningsService
from tickrtime.providers.finnhub import SymbolEarnings
from tickrtime.storage.tickers import Ticker

TODAY = date(2025, 1, 15)


def _record(symbol: str, day: str, **overrides: Any) -> EarningsRecord:
    data: dict[str, Any] = {"symbol": symbol, "date": day, "epsEstimate": 1.0, **overrides}
    return EarningsRecord.model_validate(data)


@pytest.fixture()
def mock_client() -> AsyncMock:
    client = AsyncMock()
    client.get_earnings_calendar_range = AsyncMock(return_value=[])
    client.get_earnings_calendar = AsyncMock(return_value=[])
    client.get_symbol_earnings = AsyncMock(return_value=[])
    return client


@pytest.fixture()
def mock_tickers() -> AsyncMock:
    tickers = AsyncMock()
    tickers.get_active_symbols = AsyncMock(return_value={"AAPL", "MSFT", "FLGPU"})
    tickers.get_metadata_map = AsyncMock(
        return_value={
            "AAPL": Ticker(
                symbol="AAPL",
                description="APPLE INC",
                exchange="NASDAQ",
                industry="Technology",
                sector="Technology",
            )
        }
    )
    tickers.get = AsyncMock(return_value=None)
    return tickers


@pytest.fixture()
def service(mock_client: AsyncMock, mock_tickers: AsyncMock) -> EarningsService:
    return EarningsService(mock_client, mock_tickers)


class TestGetRange:
    async def test_restricts_to_tracked_symbols_and_attaches_metadata(
        self, service: EarningsService, mock_client: AsyncMock
    ) -> None:
        mock_client.get_earnings_calendar_range.return_value = [
            [_record("AAPL", "2024-12-20"), _record("ZZZZ", "2024-12-21")],
            [_record("FLGpU", "2025-01-03")],
        ]
        result = await service.get_range(date(2024, 12, 15), date(2025, 1, 14))

        assert [r.symbol for r in result] == ["AAPL", "FLGPU"]
        assert result[0].sector == "Technology"
        assert result[0].exchange == "NASDAQ"
        assert result[1].sector is None

    async def test_descending_order(self, service: EarningsService, mock_client: AsyncMock) -> None:
        mock_client.get_earnings_calendar_range.return_value = [
            [_record("AAPL", "2025-01-02"), _record("MSFT", "2025-01-09")]
        ]
        result = await service.get_range(date(2025, 1, 1), date(2025, 1, 14), SortOrder.DESC)
        assert [r.symbol for r in result] == ["MSFT", "AAPL"]

    async def test_inverted_range_rejected_before_fetch(
        self, service: EarningsService, mock_client: AsyncMock
    ) -> None:
        with pytest.raises(RequestValidationError):
            await service.get_range(date(2025, 2, 1), date(2025, 1, 1))
        mock_client.get_earnings_calendar_range.assert_not_called()

    async def test_empty_universe_applies_no_filter(
        self, service: EarningsService, mock_client: AsyncMock, mock_tickers: AsyncMock
    ) -> None:
        mock_tickers.get_active_symbols.return_value = set()
        mock_tickers.get_metadata_map.return_value = {}
        mock_client.get_earnings_calendar_range.return_value = [[_record("ZZZZ", "2025-01-02")]]

        result = await service.get_range(date(2025, 1, 1), date(2025, 1, 14))
        assert [r.symbol for r in result] == ["ZZZZ"]


class TestRelativeWindows:
    async def test_next_30_days(self, service: EarningsService, mock_client: AsyncMock) -> None:
        with patch("tickrtime.processing.earnings.service.today", return_value=TODAY):
            await service.get_next_30_days()
        mock_client.get_earnings_calendar_range.assert_awaited_once_with(
            date(2025, 1, 15), date(2025, 2, 14)
        )

    async def test_previous_30_days(self, service: EarningsService, mock_client: AsyncMock) -> None:
        with patch("tickrtime.processing.earnings.service.today", return_value=TODAY):
            await service.get_previous_30_days()
        mock_client.get_earnings_calendar_range.assert_awaited_once_with(
            date(2024, 12, 16), date(2025, 1, 14)
        )

    async def test_get_day_sorted_by_symbol(
        self, service: EarningsService, mock_client: AsyncMock
    ) -> None:
        mock_client.get_earnings_calendar.return_value = [
            _record("MSFT", "2025-01-15"),
            _record("AAPL", "2025-01-15"),
        ]
        result = await service.get_day(TODAY)
        assert [r.symbol for r in result] == ["AAPL", "MSFT"]


class TestSearchBySymbol:
    async def test_filters_by_year_and_quarter(
        self, service: EarningsService, mock_client: AsyncMock
    ) -> None:
        mock_client.get_symbol_earnings.return_value = [
            SymbolEarnings(
                symbol="AAPL", period=date(2024, 12, 31), quarter=1, year=2025, actual=2.4
            ),
            SymbolEarnings(
                symbol="AAPL", period=date(2024, 9, 30), quarter=4, year=2024, actual=1.6
            ),
            SymbolEarnings(symbol="AAPL", period=None, quarter=3, year=2024),
        ]
        result = await service.search_by_symbol("aapl", year=2024)

        assert len(result) == 1
        assert result[0].date == date(2024, 9, 30)
        assert result[0].quarter == 4


class TestWatchlistEarnings:
    async def test_next_report_per_symbol_placeholders_last(
        self, service: EarningsService, mock_client: AsyncMock
    ) -> None:
        async def fake_calendar(
            start: date, end: date, symbol: str | None = None
        ) -> list[EarningsRecord]:
            assert start == TODAY
            assert end == date(2026, 12, 31)
            if symbol == "MSFT":
                return [_record("MSFT", "2025-04-24"), _record("MSFT", "2025-01-29")]
            if symbol == "AAPL":
                return [_record("AAPL", "2025-01-30", epsActual=None)]
            return []

        mock_client.get_earnings_calendar.side_effect = fake_calendar
        with patch("tickrtime.processing.earnings.service.today", return_value=TODAY):
            result = await service.get_watchlist_earnings(["nvda", "AAPL", "msft", "MSFT"])

        assert [e.symbol for e in result] == ["MSFT", "AAPL", "NVDA"]
        assert result[0].date == date(2025, 1, 29)
        assert result[2].date is None
        assert result[2].to_api()["surprisePercent"] is None

    async def test_failing_symbol_gets_placeholder(
        self, service: EarningsService, mock_client: AsyncMock
    ) -> None:
        mock_client.get_earnings_calendar.side_effect = UpstreamFetchError("down", status_code=500)
        with patch("tickrtime.processing.earnings.service.today", return_value=TODAY):
            result = await service.get_watchlist_earnings(["AAPL"])

        assert len(result) == 1
        assert result[0].symbol == "AAPL"
        assert result[0].date is None

    async def test_no_symbols(self, service: EarningsService, mock_client: AsyncMock) -> None:
        assert await service.get_watchlist_earnings([" ", ""]) == []
        mock_client.get_earnings_calendar.assert_not_called()
