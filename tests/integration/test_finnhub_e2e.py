"""End-to-end checks against the live Finnhub API."""

from datetime import timedelta

import pytest

from tickrtime.core.dates import split_into_month_ranges, today
from tickrtime.processing.earnings.models import SortOrder
from tickrtime.processing.earnings.reconcile import reconcile
from tickrtime.providers.finnhub import FinnhubClient

pytestmark = pytest.mark.integration


class TestFinnhubCalendar:
    async def test_month_crossing_range(self, finnhub_client: FinnhubClient) -> None:
        start = today().replace(day=20)
        end = start + timedelta(days=25)

        batches = await finnhub_client.get_earnings_calendar_range(start, end)
        records = reconcile(batches, start, end, SortOrder.ASC)

        assert len(batches) == len(split_into_month_ranges(start, end))
        assert all(start <= r.date <= end for r in records)
        keys = [(r.symbol, r.date) for r in records]
        assert len(keys) == len(set(keys))

    async def test_symbol_history(self, finnhub_client: FinnhubClient) -> None:
        history = await finnhub_client.get_symbol_earnings("AAPL")
        assert history
        assert all(e.symbol == "AAPL" for e in history)


class TestFinnhubUniverse:
    async def test_nasdaq_listing(self, finnhub_client: FinnhubClient) -> None:
        symbols = await finnhub_client.get_exchange_symbols("XNAS")
        assert any(s.symbol == "AAPL" for s in symbols)

    async def test_company_profile(self, finnhub_client: FinnhubClient) -> None:
        profile = await finnhub_client.get_company_profile("AAPL")
        assert profile is not None
        assert profile.industry
