"""Earnings calendar processing: EPS parsing, surprise metrics, reconciliation."""

from tickrtime.processing.earnings.calculations import (
    SurpriseResult,
    calculate_surprise,
    parse_eps,
)
from tickrtime.processing.earnings.models import (
    EarningsRecord,
    EnrichedEarningsRecord,
    SortOrder,
    WatchlistEarning,
)
from tickrtime.processing.earnings.reconcile import reconcile

__all__ = [
    "EarningsRecord",
    "EnrichedEarningsRecord",
    "SortOrder",
    "SurpriseResult",
    "WatchlistEarning",
    "calculate_surprise",
    "parse_eps",
    "reconcile",
]
