"""Merge per-sub-range calendar batches into one clean result set.

Reconciliation runs four passes over the batches gathered for a calendar
query: range filter, ``(symbol, date)`` dedupe, surprise enrichment, and a
stable sort by date.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date

from tickrtime.core.dates import DateRange
from tickrtime.processing.earnings.calculations import calculate_surprise
from tickrtime.processing.earnings.models import (
    EarningsRecord,
    EnrichedEarningsRecord,
    SortOrder,
)


def enrich(record: EarningsRecord) -> EnrichedEarningsRecord:
    """Attach surprise and surprise percent to a record."""
    result = calculate_surprise(record.actual, record.estimate)
    return EnrichedEarningsRecord(
        **record.model_dump(),
        surprise=result.surprise,
        surprise_percent=result.surprise_percent,
    )


def filter_to_range(records: Iterable[EarningsRecord], bounds: DateRange) -> list[EarningsRecord]:
    return [r for r in records if bounds.contains(r.date)]


def dedupe(records: Iterable[EarningsRecord]) -> list[EarningsRecord]:
    """Drop later records sharing ``(symbol, date)`` with an earlier one."""
    seen: set[tuple[str, date]] = set()
    unique: list[EarningsRecord] = []
    for record in records:
        key = (record.symbol, record.date)
        if key in seen:
            continue
        seen.add(key)
        unique.append(record)
    return unique


def sort_by_date(
    records: Iterable[EnrichedEarningsRecord],
    order: SortOrder = SortOrder.ASC,
) -> list[EnrichedEarningsRecord]:
    # sorted() is stable in both directions, so ties keep their relative order
    return sorted(records, key=lambda r: r.date, reverse=order == SortOrder.DESC)


def reconcile(
    batches: Sequence[Sequence[EarningsRecord]],
    start: date,
    end: date,
    order: SortOrder = SortOrder.ASC,
) -> list[EnrichedEarningsRecord]:
    """Filter, dedupe, enrich and sort calendar batches.

    Args:
        batches: One sequence of records per sub-range, in sub-range order.
            A failed sub-fetch contributes an empty batch.
        start: First day of the requested range (inclusive)
        end: Last day of the requested range (inclusive)
        order: Date sort direction

    Returns:
        Enriched records within ``[start, end]``, one per ``(symbol, date)``
    """
    bounds = DateRange(start, end)
    merged = [record for batch in batches for record in batch]
    unique = dedupe(filter_to_range(merged, bounds))
    return sort_by_date((enrich(r) for r in unique), order)
