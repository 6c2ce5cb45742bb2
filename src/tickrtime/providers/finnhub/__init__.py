"""Finnhub provider for earnings calendars, earnings history and the ticker universe.

Free tier: 60 calls/min across all endpoints.
"""

from tickrtime.providers.finnhub.client import FinnhubClient
from tickrtime.providers.finnhub.models import CompanyProfile, ExchangeSymbol, SymbolEarnings

__all__ = [
    "CompanyProfile",
    "ExchangeSymbol",
    "FinnhubClient",
    "SymbolEarnings",
]
