"""Core utilities: dates, symbols, exceptions, logging."""

from tickrtime.core.dates import DateRange, split_into_month_ranges
from tickrtime.core.exceptions import TickrTimeError
from tickrtime.core.logging import get_logger, setup_logging
from tickrtime.core.symbols import diff_symbols, normalize_symbol, symbols_equal

__all__ = [
    "DateRange",
    "TickrTimeError",
    "diff_symbols",
    "get_logger",
    "normalize_symbol",
    "setup_logging",
    "split_into_month_ranges",
    "symbols_equal",
]
