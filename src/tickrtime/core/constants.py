"""Application-wide constants.

These are fixed values that don't change between environments.
For configurable values, see config.py Settings.
"""

# ─────────────────────────────────────────────────────────────
# API Rate Limits (external constraints)
# ─────────────────────────────────────────────────────────────
FINNHUB_RATE_LIMIT_CALLS_PER_MINUTE = 60  # Free tier limit
ENRICHMENT_BATCH_SIZE = 50  # Profiles fetched per sync run
ENRICHMENT_DELAY_SECONDS = 1.1  # ~54 calls/min max

# ─────────────────────────────────────────────────────────────
# API URL Defaults (used as defaults in Settings)
# ─────────────────────────────────────────────────────────────
DEFAULT_FINNHUB_API_URL = "https://finnhub.io/api/v1"
DEV_JWT_SECRET = "dev-secret-change-me"  # Rejected when TICKRTIME_ENV=production

# ─────────────────────────────────────────────────────────────
# Ticker universe
# ─────────────────────────────────────────────────────────────
# (MIC, exchange display name) pairs synced from Finnhub
SYNC_EXCHANGES: tuple[tuple[str, str], ...] = (
    ("XNAS", "NASDAQ"),
    ("XNYS", "NYSE"),
)

# ─────────────────────────────────────────────────────────────
# Earnings windows (days)
# ─────────────────────────────────────────────────────────────
LOOKAHEAD_DAYS = 30
LOOKBACK_DAYS = 30

# ─────────────────────────────────────────────────────────────
# Redis key schema
# ─────────────────────────────────────────────────────────────
REDIS_PREFIX = "tickrtime"
TICKER_KEY_PREFIX = f"{REDIS_PREFIX}:ticker:"
TICKERS_ACTIVE_KEY = f"{REDIS_PREFIX}:tickers:active"
TICKERS_ALL_KEY = f"{REDIS_PREFIX}:tickers:all"
TICKERS_UNENRICHED_KEY = f"{REDIS_PREFIX}:tickers:unenriched"
USER_KEY_PREFIX = f"{REDIS_PREFIX}:user:"
USER_EMAIL_KEY_PREFIX = f"{REDIS_PREFIX}:user:email:"
WATCHLIST_KEY_PREFIX = f"{REDIS_PREFIX}:watchlist:"
ALERTS_KEY_PREFIX = f"{REDIS_PREFIX}:alerts:"
