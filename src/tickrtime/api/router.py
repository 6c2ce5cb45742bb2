"""Top-level API router, mounted under /api."""

from fastapi import APIRouter

from tickrtime.api.routes import alerts, auth, cron, earnings, tickers, watchlist

api_router = APIRouter()
api_router.include_router(earnings.router, prefix="/earnings", tags=["earnings"])
api_router.include_router(tickers.router, prefix="/tickers", tags=["tickers"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(watchlist.router, prefix="/watchlist", tags=["watchlist"])
api_router.include_router(alerts.router, prefix="/alerts", tags=["alerts"])
api_router.include_router(cron.router, prefix="/cron", tags=["cron"])
