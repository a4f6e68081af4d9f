"""User and notification models."""

from datetime import datetime

from pydantic import EmailStr, Field

from .base import CamelModel
from .enums import NotificationType, PendingStatus, UserRole

MAX_NOTIFICATIONS = 50
MAX_NOTIFICATION_LENGTH = 500


class Notification(CamelModel):
    """In-app notification embedded in a user record."""

    notification_id: str = Field(..., alias="_id")
    message: str = Field(..., min_length=1, max_length=MAX_NOTIFICATION_LENGTH)
    type: NotificationType = NotificationType.INFO
    read: bool = False
    created_at: datetime


class User(CamelModel):
    """A registered account. The password hash is stored beside, never on, the model."""

    user_id: str = Field(..., alias="_id")
    username: str = Field(..., min_length=1)
    email: EmailStr
    google_id: str | None = None
    role: UserRole = UserRole.USER
    pending_status: PendingStatus = PendingStatus.NOT_PENDING
    last_login: datetime | None = None
    notifications: list[Notification] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class UserSummary(CamelModel):
    """Admin listing row."""

    user_id: str = Field(..., alias="_id")
    username: str
    email: str
    role: UserRole
    last_login: datetime | None = None


class UserCreate(CamelModel):
    """Signup payload."""

    username: str = ""
    email: str = ""
    password: str = ""


class Credentials(CamelModel):
    """Login payload."""

    email: str = ""
    password: str = ""


class TokenClaims(CamelModel):
    """Claims carried by a session JWT."""

    user_id: str
    username: str
    email: str
    role: UserRole
