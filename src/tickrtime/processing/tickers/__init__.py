"""Ticker universe maintenance: exchange sync and sector mapping."""

from tickrtime.processing.tickers.sectors import SECTOR_MAPPING, map_industry_to_sector
from tickrtime.processing.tickers.sync import SyncStats, TickerSyncer

__all__ = [
    "SECTOR_MAPPING",
    "SyncStats",
    "TickerSyncer",
    "map_industry_to_sector",
]
