"""Per-user earnings alert storage.

Redis Key Schema:
- tickrtime:alerts:{user_id} - Hash of alert_id -> JSON-encoded Alert

Alerts are stored only; delivery is handled outside this service.
"""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import TYPE_CHECKING, Any, Literal
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from tickrtime.core.constants import ALERTS_KEY_PREFIX
from tickrtime.core.logging import get_logger
from tickrtime.core.symbols import normalize_symbol

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = get_logger(__name__)

AlertType = Literal["before", "after"]
AlertStatus = Literal["active", "sent", "cancelled"]


class Alert(BaseModel):
    """Notify a user some days before or after a symbol's earnings date."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    symbol: str
    alert_type: AlertType
    days_before: int | None = None
    days_after: int | None = None
    recurring: bool = False
    earnings_date: date
    status: AlertStatus = "active"
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("symbol", mode="before")
    @classmethod
    def normalize_symbol_field(cls, v: Any) -> Any:
        return normalize_symbol(v) if isinstance(v, str) else v

    def to_api(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "userId": self.user_id,
            "symbol": self.symbol,
            "alertType": self.alert_type,
            "daysBefore": self.days_before,
            "daysAfter": self.days_after,
            "recurring": self.recurring,
            "earningsDate": self.earnings_date.isoformat(),
            "status": self.status,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }


class AlertStore:
    """Manage per-user earnings alerts in Redis."""

    def __init__(self, redis: Redis) -> None:
        self.redis = redis

    @staticmethod
    def _key(user_id: str) -> str:
        return f"{ALERTS_KEY_PREFIX}{user_id}"

    async def get_all(self, user_id: str) -> list[Alert]:
        """All alerts for a user, newest first."""
        rows: dict[str, str] = await self.redis.hgetall(self._key(user_id))  # type: ignore[misc]
        alerts = [Alert.model_validate_json(raw) for raw in rows.values()]
        alerts.sort(key=lambda a: a.created_at, reverse=True)
        return alerts

    async def get(self, user_id: str, alert_id: str) -> Alert | None:
        raw = await self.redis.hget(self._key(user_id), alert_id)  # type: ignore[misc]
        if not raw:
            return None
        return Alert.model_validate_json(raw)

    async def create(self, alert: Alert) -> Alert:
        await self.redis.hset(  # type: ignore[misc]
            self._key(alert.user_id), mapping={alert.id: alert.model_dump_json()}
        )
        logger.info(
            "Alert created",
            user_id=alert.user_id,
            alert_id=alert.id,
            ticker=alert.symbol,
            alert_type=alert.alert_type,
        )
        return alert

    async def update(self, user_id: str, alert_id: str, **changes: Any) -> Alert | None:
        """Apply field changes to an alert. Returns None if it does not exist."""
        alert = await self.get(user_id, alert_id)
        if alert is None:
            return None
        updated = Alert.model_validate(
            {**alert.model_dump(), **changes, "updated_at": datetime.now(UTC)}
        )
        await self.redis.hset(  # type: ignore[misc]
            self._key(user_id), mapping={alert_id: updated.model_dump_json()}
        )
        return updated

    async def delete(self, user_id: str, alert_id: str) -> bool:
        removed = bool(await self.redis.hdel(self._key(user_id), alert_id))  # type: ignore[misc]
        if removed:
            logger.info("Alert deleted", user_id=user_id, alert_id=alert_id)
        return removed

    async def delete_all(self, user_id: str) -> int:
        """Remove every alert for a user. Returns how many were removed."""
        count: int = await self.redis.hlen(self._key(user_id))  # type: ignore[misc]
        await self.redis.delete(self._key(user_id))
        return count
