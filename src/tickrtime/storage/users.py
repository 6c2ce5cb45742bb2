"""User account storage.

Redis Key Schema:
- tickrtime:user:{id} - JSON-encoded User
- tickrtime:user:email:{email} - User id, used as a unique email index
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from pydantic import BaseModel, Field

from tickrtime.core.constants import USER_EMAIL_KEY_PREFIX, USER_KEY_PREFIX
from tickrtime.core.exceptions import ConflictError
from tickrtime.core.logging import get_logger

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = get_logger(__name__)


class NotificationPreferences(BaseModel):
    email_enabled: bool = True
    default_days_before: int = Field(default=1, ge=0)
    default_days_after: int = Field(default=0, ge=0)

    def to_api(self) -> dict[str, Any]:
        return {
            "emailEnabled": self.email_enabled,
            "defaultDaysBefore": self.default_days_before,
            "defaultDaysAfter": self.default_days_after,
        }


class User(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    email: str
    password_hash: str
    email_verified: bool = False
    notification_preferences: NotificationPreferences = Field(
        default_factory=NotificationPreferences
    )
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def to_public(self) -> dict[str, Any]:
        """API representation (never includes the password hash)."""
        return {
            "id": self.id,
            "email": self.email,
            "emailVerified": self.email_verified,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }


def _user_key(user_id: str) -> str:
    return f"{USER_KEY_PREFIX}{user_id}"


def _email_key(email: str) -> str:
    return f"{USER_EMAIL_KEY_PREFIX}{email.strip().lower()}"


class UserStore:
    """Redis-backed user accounts keyed by id with a unique email index."""

    def __init__(self, redis: Redis) -> None:
        self.redis = redis

    async def create(self, email: str, password_hash: str) -> User:
        """Create a user.

        The email index is claimed first and released again if the user
        record cannot be written.

        Raises:
            ConflictError: if the email is already registered
        """
        user = User(email=email.strip().lower(), password_hash=password_hash)
        email_key = _email_key(user.email)
        claimed = await self.redis.set(email_key, user.id, nx=True)
        if not claimed:
            raise ConflictError("User with this email already exists")

        try:
            await self.redis.set(_user_key(user.id), user.model_dump_json())
        except Exception:
            logger.error("Failed to write user record, releasing email", user_id=user.id)
            await self.redis.delete(email_key)
            raise
        logger.info("User created", user_id=user.id)
        return user

    async def get_by_id(self, user_id: str) -> User | None:
        raw = await self.redis.get(_user_key(user_id))
        if not raw:
            return None
        return User.model_validate_json(raw)

    async def get_by_email(self, email: str) -> User | None:
        user_id = await self.redis.get(_email_key(email))
        if not user_id:
            return None
        return await self.get_by_id(user_id)

    async def _save(self, user: User, **changes: Any) -> User:
        updated = user.model_copy(update={**changes, "updated_at": datetime.now(UTC)})
        await self.redis.set(_user_key(user.id), updated.model_dump_json())
        return updated

    async def update_password(self, user: User, password_hash: str) -> User:
        updated = await self._save(user, password_hash=password_hash)
        logger.info("Password changed", user_id=user.id)
        return updated

    async def update_preferences(self, user: User, preferences: NotificationPreferences) -> User:
        return await self._save(user, notification_preferences=preferences)

    async def delete(self, user: User) -> bool:
        """Remove the user record and its email index entry."""
        deleted = await self.redis.delete(_user_key(user.id), _email_key(user.email))
        logger.info("User deleted", user_id=user.id)
        return bool(deleted)
