"""Tests for Redis client module."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from tickrtime.core.exceptions import StorageError
from tickrtime.storage.redis import close_redis, init_redis


class TestInitRedis:
    """Tests for init_redis function."""

    async def test_init_creates_client(self) -> None:
        mock_redis = MagicMock()
        mock_redis.ping = AsyncMock(return_value=True)

        with patch("tickrtime.storage.redis.Redis") as mock_redis_cls:
            mock_redis_cls.from_url.return_value = mock_redis

            result = await init_redis("redis://localhost:6379")

        assert result is mock_redis
        mock_redis_cls.from_url.assert_called_once_with(
            "redis://localhost:6379",
            decode_responses=True,
        )
        mock_redis.ping.assert_awaited_once()

    async def test_connection_failure_raises_storage_error(self) -> None:
        mock_redis = MagicMock()
        mock_redis.ping = AsyncMock(side_effect=ConnectionError("refused"))
        mock_redis.aclose = AsyncMock()

        with patch("tickrtime.storage.redis.Redis") as mock_redis_cls:
            mock_redis_cls.from_url.return_value = mock_redis

            with pytest.raises(StorageError, match="Redis connection failed"):
                await init_redis("redis://localhost:6379")

        mock_redis.aclose.assert_awaited_once()


class TestCloseRedis:
    """Tests for close_redis function."""

    async def test_close(self) -> None:
        mock_redis = MagicMock()
        mock_redis.aclose = AsyncMock()

        await close_redis(mock_redis)

        mock_redis.aclose.assert_awaited_once()

    async def test_close_none(self) -> None:
        # Should not raise
        await close_redis(None)
