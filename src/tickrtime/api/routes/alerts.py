"""Earnings alert and notification preference endpoints (Bearer token required)."""

from __future__ import annotations

from datetime import date
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field, StrictBool

from tickrtime.core.dates import parse_iso_date
from tickrtime.core.dependencies import AlertStoreDep, CurrentUserDep, UserStoreDep
from tickrtime.core.exceptions import NotFoundError, RequestValidationError
from tickrtime.storage.alerts import Alert, AlertStatus, AlertStore

router = APIRouter()


class CreateAlertRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    symbol: str = ""
    alert_type: str | None = Field(default=None, alias="alertType")
    days_before: int | None = Field(default=None, alias="daysBefore")
    days_after: int | None = Field(default=None, alias="daysAfter")
    recurring: bool = False
    earnings_date: str | None = Field(default=None, alias="earningsDate")


class UpdateAlertRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    days_before: int | None = Field(default=None, ge=0, alias="daysBefore")
    days_after: int | None = Field(default=None, ge=0, alias="daysAfter")
    recurring: bool | None = None
    earnings_date: str | None = Field(default=None, alias="earningsDate")
    status: AlertStatus | None = None


class PreferencesRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email_enabled: StrictBool | None = Field(default=None, alias="emailEnabled")
    default_days_before: int | None = Field(default=None, ge=0, alias="defaultDaysBefore")
    default_days_after: int | None = Field(default=None, ge=0, alias="defaultDaysAfter")


def _parse_earnings_date(value: str) -> date:
    try:
        return parse_iso_date(value)
    except ValueError:
        raise RequestValidationError("earningsDate must be a YYYY-MM-DD date") from None


async def _get_owned(alerts: AlertStore, user_id: str, alert_id: str) -> Alert:
    alert = await alerts.get(user_id, alert_id)
    if alert is None:
        raise NotFoundError("Alert not found")
    return alert


# Must stay above the /{alert_id} routes
@router.get("/preferences")
async def get_preferences(user: CurrentUserDep) -> dict[str, Any]:
    return {"success": True, "preferences": user.notification_preferences.to_api()}


@router.put("/preferences")
async def update_preferences(
    body: PreferencesRequest,
    user: CurrentUserDep,
    users: UserStoreDep,
) -> dict[str, Any]:
    changes = body.model_dump(exclude_none=True)
    preferences = user.notification_preferences.model_copy(update=changes)
    await users.update_preferences(user, preferences)
    return {
        "success": True,
        "message": "Preferences updated successfully",
        "preferences": preferences.to_api(),
    }


@router.get("/")
async def list_alerts(user: CurrentUserDep, alerts: AlertStoreDep) -> dict[str, Any]:
    return {"success": True, "alerts": [a.to_api() for a in await alerts.get_all(user.id)]}


@router.post("/")
async def create_alert(
    body: CreateAlertRequest,
    user: CurrentUserDep,
    alerts: AlertStoreDep,
) -> dict[str, Any]:
    if not body.symbol.strip() or not body.alert_type or not body.earnings_date:
        raise RequestValidationError("Missing required fields: symbol, alertType, earningsDate")
    if body.alert_type not in ("before", "after"):
        raise RequestValidationError("alertType must be 'before' or 'after'")
    if body.alert_type == "before" and (body.days_before is None or body.days_before < 1):
        raise RequestValidationError("daysBefore is required for before alerts")
    if body.alert_type == "after" and (body.days_after is None or body.days_after < 0):
        raise RequestValidationError("daysAfter is required for after alerts")

    alert = await alerts.create(
        Alert(
            user_id=user.id,
            symbol=body.symbol,
            alert_type=body.alert_type,
            days_before=body.days_before if body.alert_type == "before" else None,
            days_after=body.days_after if body.alert_type == "after" else None,
            recurring=body.recurring,
            earnings_date=_parse_earnings_date(body.earnings_date),
        )
    )
    return {"success": True, "message": "Alert created successfully", "alert": alert.to_api()}


@router.get("/{alert_id}")
async def get_alert(alert_id: str, user: CurrentUserDep, alerts: AlertStoreDep) -> dict[str, Any]:
    alert = await _get_owned(alerts, user.id, alert_id)
    return {"success": True, "alert": alert.to_api()}


@router.put("/{alert_id}")
async def update_alert(
    alert_id: str,
    body: UpdateAlertRequest,
    user: CurrentUserDep,
    alerts: AlertStoreDep,
) -> dict[str, Any]:
    await _get_owned(alerts, user.id, alert_id)
    changes: dict[str, Any] = body.model_dump(exclude_none=True)
    if "earnings_date" in changes:
        changes["earnings_date"] = _parse_earnings_date(changes["earnings_date"])

    alert = await alerts.update(user.id, alert_id, **changes)
    if alert is None:
        raise NotFoundError("Alert not found")
    return {"success": True, "message": "Alert updated successfully", "alert": alert.to_api()}


@router.delete("/{alert_id}")
async def delete_alert(
    alert_id: str,
    user: CurrentUserDep,
    alerts: AlertStoreDep,
) -> dict[str, Any]:
    await _get_owned(alerts, user.id, alert_id)
    await alerts.delete(user.id, alert_id)
    return {"success": True, "message": "Alert deleted successfully"}
