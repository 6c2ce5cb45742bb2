"""Storage layer: Redis-backed tickers, users, watchlists and alerts."""

from tickrtime.storage.alerts import Alert, AlertStore
from tickrtime.storage.redis import close_redis, init_redis
from tickrtime.storage.tickers import Ticker, TickerStore
from tickrtime.storage.users import NotificationPreferences, User, UserStore
from tickrtime.storage.watchlist import Watchlist, WatchlistItem, WatchlistStore

__all__ = [
    "Alert",
    "AlertStore",
    "NotificationPreferences",
    "Ticker",
    "TickerStore",
    "User",
    "UserStore",
    "Watchlist",
    "WatchlistItem",
    "WatchlistStore",
    "close_redis",
    "init_redis",
]
