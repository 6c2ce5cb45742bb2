"""Shared fixtures for integration tests.

These tests call the real Finnhub API and need FINNHUB_API_KEY in the
environment or .env file.
"""

from collections.abc import AsyncIterator

import pytest

from tickrtime.config import get_settings
from tickrtime.providers.finnhub import FinnhubClient


@pytest.fixture
async def finnhub_client() -> AsyncIterator[FinnhubClient]:
    """Real Finnhub client; skips the test when no API key is configured."""
    settings = get_settings()
    if not settings.finnhub_api_key:
        pytest.skip("FINNHUB_API_KEY not set")

    client = FinnhubClient(
        api_key=settings.finnhub_api_key.get_secret_value(),
        base_url=settings.finnhub_api_url,
    )
    yield client
    await client.close()
