"""Signup, login, current-user and account management endpoints."""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, Field

from tickrtime.config import Settings
from tickrtime.core.auth import (
    create_access_token,
    hash_password,
    is_valid_email,
    validate_password,
    verify_password,
)
from tickrtime.core.dependencies import (
    AlertStoreDep,
    CurrentUserDep,
    SettingsDep,
    UserStoreDep,
    WatchlistStoreDep,
)
from tickrtime.core.exceptions import AuthError, RequestValidationError
from tickrtime.core.logging import get_logger
from tickrtime.storage.users import User

logger = get_logger(__name__)

router = APIRouter()


class Credentials(BaseModel):
    email: str = ""
    password: str = ""


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(default="", alias="currentPassword")
    new_password: str = Field(default="", alias="newPassword")


def _issue_token(user: User, settings: Settings) -> str:
    return create_access_token(
        user_id=user.id,
        email=user.email,
        email_verified=user.email_verified,
        secret=settings.jwt_secret.get_secret_value(),
        expires_in=timedelta(days=settings.jwt_expire_days),
    )


@router.post("/signup", status_code=201)
async def signup(body: Credentials, users: UserStoreDep, settings: SettingsDep) -> dict[str, Any]:
    email = body.email.strip()
    if not email or not body.password:
        raise RequestValidationError("Email and password are required")
    if not is_valid_email(email):
        raise RequestValidationError("Invalid email format")
    problem = validate_password(body.password)
    if problem:
        raise RequestValidationError(problem)

    user = await users.create(email, hash_password(body.password))
    return {
        "success": True,
        "message": "User created successfully",
        "user": user.to_public(),
        "token": _issue_token(user, settings),
    }


@router.post("/login")
async def login(body: Credentials, users: UserStoreDep, settings: SettingsDep) -> dict[str, Any]:
    if not body.email.strip() or not body.password:
        raise RequestValidationError("Email and password are required")

    user = await users.get_by_email(body.email)
    if user is None or not verify_password(body.password, user.password_hash):
        logger.info("Login failed")
        raise AuthError("Invalid email or password")

    return {
        "success": True,
        "message": "Login successful",
        "user": user.to_public(),
        "token": _issue_token(user, settings),
    }


@router.get("/me")
async def me(user: CurrentUserDep) -> dict[str, Any]:
    return {"user": user.to_public()}


@router.post("/change-password")
async def change_password(
    body: ChangePasswordRequest,
    user: CurrentUserDep,
    users: UserStoreDep,
) -> dict[str, Any]:
    if not body.current_password or not body.new_password:
        raise RequestValidationError("Current password and new password are required")
    problem = validate_password(body.new_password)
    if problem:
        raise RequestValidationError(problem)
    if not verify_password(body.current_password, user.password_hash):
        raise AuthError("Current password is incorrect")

    await users.update_password(user, hash_password(body.new_password))
    return {"success": True, "message": "Password changed successfully"}


@router.delete("/account")
async def delete_account(
    user: CurrentUserDep,
    users: UserStoreDep,
    watchlists: WatchlistStoreDep,
    alerts: AlertStoreDep,
) -> dict[str, Any]:
    """Delete the account along with its alerts and watchlist."""
    logger.info("Starting account deletion", user_id=user.id)
    removed_alerts = await alerts.delete_all(user.id)
    await watchlists.delete(user.id)
    await users.delete(user)
    logger.info("Account deleted", user_id=user.id, alerts=removed_alerts)
    return {
        "success": True,
        "message": "Account and all associated data have been deleted successfully",
    }
