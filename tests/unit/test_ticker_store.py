"""Tests for the Redis-backed ticker universe store."""

from __future__ import annotations

from typing import Any

import pytest

from tickrtime.core.constants import TICKERS_ACTIVE_KEY, TICKERS_UNENRICHED_KEY
from tickrtime.storage.tickers import Ticker, TickerStore


@pytest.fixture()
def store(memory_redis: Any) -> TickerStore:
    return TickerStore(memory_redis)


class TestUpsert:
    async def test_new_ticker_is_active_and_unenriched(
        self, store: TickerStore, memory_redis: Any
    ) -> None:
        is_new = await store.upsert("flgpu", "FLAG SHIP ACQ", "NASDAQ")

        assert is_new is True
        assert await store.get_active_symbols() == {"FLGPU"}
        assert "FLGPU" in memory_redis.sets[TICKERS_UNENRICHED_KEY]
        ticker = await store.get("FLGpU")
        assert ticker is not None
        assert ticker.description == "FLAG SHIP ACQ"
        assert ticker.created_at is not None

    async def test_existing_ticker_keeps_profile(self, store: TickerStore) -> None:
        await store.upsert("AAPL", "APPLE INC", "NASDAQ")
        await store.update_profile("AAPL", industry="Technology", sector="Technology")

        is_new = await store.upsert("AAPL", "APPLE INC.", "NASDAQ")
        ticker = await store.get("AAPL")

        assert is_new is False
        assert ticker is not None
        assert ticker.description == "APPLE INC."
        assert ticker.sector == "Technology"


class TestLifecycle:
    async def test_mark_inactive(self, store: TickerStore, memory_redis: Any) -> None:
        await store.upsert("TSLA", "TESLA INC", "NASDAQ")
        assert await store.mark_inactive("tsla") is True

        ticker = await store.get("TSLA")
        assert ticker is not None
        assert ticker.is_active is False
        assert "TSLA" not in memory_redis.sets[TICKERS_ACTIVE_KEY]
        assert "TSLA" not in memory_redis.sets[TICKERS_UNENRICHED_KEY]

    async def test_mark_inactive_unknown_symbol(self, store: TickerStore) -> None:
        assert await store.mark_inactive("NOPE") is False

    async def test_unenriched_batch_is_sorted_and_limited(self, store: TickerStore) -> None:
        for symbol in ("MSFT", "AAPL", "NVDA"):
            await store.upsert(symbol, symbol, "NASDAQ")

        batch = await store.get_unenriched(limit=2)
        assert [t.symbol for t in batch] == ["AAPL", "MSFT"]
        assert await store.get_unenriched(limit=0) == []

    async def test_update_profile_clears_unenriched(self, store: TickerStore) -> None:
        await store.upsert("AAPL", "APPLE INC", "NASDAQ")
        await store.update_profile("AAPL", industry="Technology", sector="Technology")

        assert await store.get_unenriched() == []
        ticker = await store.get("AAPL")
        assert ticker is not None
        assert ticker.profile_fetched_at is not None


class TestQueries:
    @pytest.fixture(autouse=True)
    async def seed(self, store: TickerStore) -> None:
        await store.upsert("AAPL", "APPLE INC", "NASDAQ")
        await store.upsert("JPM", "JPMORGAN CHASE & CO", "NYSE")
        await store.upsert("MSFT", "MICROSOFT CORP", "NASDAQ")
        await store.update_profile("AAPL", industry="Technology", sector="Technology")
        await store.update_profile("MSFT", industry="Technology", sector="Technology")
        await store.update_profile("JPM", industry="Banking", sector="Financial Services")

    async def test_metadata_map(self, store: TickerStore) -> None:
        metadata = await store.get_metadata_map()
        assert set(metadata) == {"AAPL", "JPM", "MSFT"}
        assert isinstance(metadata["JPM"], Ticker)

    async def test_list_by_sector(self, store: TickerStore) -> None:
        page, total = await store.list_tickers(sector="Technology")
        assert total == 2
        assert [t.symbol for t in page] == ["AAPL", "MSFT"]

    async def test_search_matches_description(self, store: TickerStore) -> None:
        page, total = await store.list_tickers(search="chase")
        assert total == 1
        assert page[0].symbol == "JPM"

    async def test_pagination(self, store: TickerStore) -> None:
        page, total = await store.list_tickers(limit=1, offset=1)
        assert total == 3
        assert [t.symbol for t in page] == ["JPM"]

    async def test_distinct_sectors(self, store: TickerStore) -> None:
        assert await store.distinct_sectors() == ["Financial Services", "Technology"]

    async def test_count(self, store: TickerStore) -> None:
        assert await store.count() == 3


class TestTickerModel:
    def test_hash_round_trip_maps_blank_to_none(self) -> None:
        ticker = Ticker(symbol="AAPL", description="APPLE INC")
        restored = Ticker.from_hash(ticker.to_hash())
        assert restored.industry is None
        assert restored.is_active is True

    def test_api_shape(self) -> None:
        payload = Ticker(symbol="AAPL", is_active=False).to_api()
        assert payload["isActive"] is False
        assert payload["profileFetchedAt"] is None
