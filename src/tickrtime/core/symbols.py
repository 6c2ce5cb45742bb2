"""Ticker symbol normalization.

Finnhub occasionally returns mixed-case symbols (e.g. ``FLGpU``) while
storage holds uppercase only, so every comparison normalizes both sides.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field


def normalize_symbol(symbol: str) -> str:
    """Trim whitespace and uppercase a ticker symbol."""
    return symbol.strip().upper()


def symbols_equal(a: str, b: str) -> bool:
    """Compare two symbols case-insensitively."""
    return normalize_symbol(a) == normalize_symbol(b)


@dataclass
class SymbolDiff:
    """Result of comparing the provider's symbol universe with storage."""

    new: list[str] = field(default_factory=list)
    delisted: list[str] = field(default_factory=list)


def diff_symbols(provider: Iterable[str], stored: Iterable[str]) -> SymbolDiff:
    """Find symbols new at the provider and symbols no longer listed.

    Both sides are normalized before the sets are built. Output symbols are
    normalized and sorted.
    """
    provider_set = {normalize_symbol(s) for s in provider if s and s.strip()}
    stored_set = {normalize_symbol(s) for s in stored if s and s.strip()}
    return SymbolDiff(
        new=sorted(provider_set - stored_set),
        delisted=sorted(stored_set - provider_set),
    )
