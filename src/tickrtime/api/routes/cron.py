"""Endpoints for externally triggered maintenance jobs."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from tickrtime.core.dependencies import TickerSyncerDep, verify_cron_secret

router = APIRouter(dependencies=[Depends(verify_cron_secret)])


@router.post("/sync-tickers")
async def sync_tickers(syncer: TickerSyncerDep) -> dict[str, Any]:
    """Run the ticker universe sync now and report what changed."""
    stats = await syncer.run()
    return {"success": True, "stats": stats.to_api()}
