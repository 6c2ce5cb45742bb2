"""Upstream data providers."""

from tickrtime.providers.finnhub import FinnhubClient

__all__ = ["FinnhubClient"]
