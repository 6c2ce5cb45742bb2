"""FastAPI dependencies for dependency injection.

Long-lived clients (Redis, Finnhub) are created in the application lifespan
and kept on ``app.state``; the getters below only read them.
"""

from __future__ import annotations

import hmac
from typing import Annotated

from fastapi import Depends, Header, Request
from redis.asyncio import Redis

from tickrtime.config import Settings, get_settings
from tickrtime.core.auth import decode_access_token
from tickrtime.core.exceptions import AuthError
from tickrtime.processing.earnings.service import EarningsService
from tickrtime.processing.tickers import TickerSyncer
from tickrtime.providers.finnhub import FinnhubClient
from tickrtime.storage.alerts import AlertStore
from tickrtime.storage.tickers import TickerStore
from tickrtime.storage.users import User, UserStore
from tickrtime.storage.watchlist import WatchlistStore

# Type aliases for cleaner dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_redis(request: Request) -> Redis:
    """Get the Redis client from app.state (set during lifespan)."""
    return request.app.state.redis  # type: ignore[no-any-return]


def get_finnhub_client(request: Request) -> FinnhubClient:
    """Get the Finnhub client from app.state (set during lifespan)."""
    return request.app.state.finnhub  # type: ignore[no-any-return]


RedisDep = Annotated[Redis, Depends(get_redis)]
FinnhubClientDep = Annotated[FinnhubClient, Depends(get_finnhub_client)]


def get_ticker_store(redis: RedisDep) -> TickerStore:
    return TickerStore(redis)


def get_user_store(redis: RedisDep) -> UserStore:
    return UserStore(redis)


def get_watchlist_store(redis: RedisDep) -> WatchlistStore:
    return WatchlistStore(redis)


def get_alert_store(redis: RedisDep) -> AlertStore:
    return AlertStore(redis)


TickerStoreDep = Annotated[TickerStore, Depends(get_ticker_store)]
UserStoreDep = Annotated[UserStore, Depends(get_user_store)]
WatchlistStoreDep = Annotated[WatchlistStore, Depends(get_watchlist_store)]
AlertStoreDep = Annotated[AlertStore, Depends(get_alert_store)]


def get_earnings_service(
    client: FinnhubClientDep,
    tickers: TickerStoreDep,
    settings: SettingsDep,
) -> EarningsService:
    return EarningsService(client, tickers, max_concurrency=settings.finnhub_max_concurrency)


def get_ticker_syncer(
    client: FinnhubClientDep,
    tickers: TickerStoreDep,
    settings: SettingsDep,
) -> TickerSyncer:
    return TickerSyncer(
        client,
        tickers,
        enrichment_batch_size=settings.ticker_enrichment_batch_size,
        enrichment_delay=settings.ticker_enrichment_delay,
    )


EarningsServiceDep = Annotated[EarningsService, Depends(get_earnings_service)]
TickerSyncerDep = Annotated[TickerSyncer, Depends(get_ticker_syncer)]


async def get_current_user(
    users: UserStoreDep,
    settings: SettingsDep,
    authorization: Annotated[str | None, Header()] = None,
) -> User:
    """Resolve the user from an ``Authorization: Bearer <token>`` header.

    Raises:
        AuthError: if the header is missing, the token is invalid or the user no longer exists
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthError("No authorization token provided")

    claims = decode_access_token(
        authorization.removeprefix("Bearer ").strip(),
        settings.jwt_secret.get_secret_value(),
    )
    user = await users.get_by_id(claims.user_id)
    if user is None:
        raise AuthError("Invalid or expired token")
    return user


CurrentUserDep = Annotated[User, Depends(get_current_user)]


def verify_cron_secret(
    settings: SettingsDep,
    x_cron_secret: Annotated[str | None, Header()] = None,
) -> None:
    """Require a matching ``x-cron-secret`` header when CRON_SECRET is configured."""
    if settings.cron_secret is None:
        return
    expected = settings.cron_secret.get_secret_value()
    if not x_cron_secret or not hmac.compare_digest(x_cron_secret, expected):
        raise AuthError("Unauthorized")
