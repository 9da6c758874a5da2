"""User and authentication session models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .enums import UserRole, UserStatus


class UserPreferences(BaseModel):
    enable_notifications: bool = True
    enable_email_notifications: bool = True
    enable_sms_notifications: bool = False
    preferred_language: str = "en"
    preferred_time_zone: str = "UTC"
    enable_dark_mode: bool = False


class UserDomain(BaseModel):
    """Domain model for an authenticated GullyCric user."""

    id: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    phone_number: Optional[str] = None
    first_name: str = ""
    last_name: str = ""
    is_email_verified: bool = False
    is_phone_verified: bool = False
    role: UserRole = Field(default=UserRole.USER)
    status: UserStatus = Field(default=UserStatus.ACTIVE)
    player_id: Optional[str] = Field(None, description="Linked cricket profile")
    preferences: UserPreferences = Field(default_factory=UserPreferences)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def display_name(self) -> str:
        return self.first_name or self.full_name or self.email

    @property
    def initials(self) -> str:
        first = self.first_name[:1].upper()
        last = self.last_name[:1].upper()
        return f"{first}{last}"

    @property
    def is_profile_complete(self) -> bool:
        return bool(
            self.first_name
            and self.last_name
            and self.is_email_verified
            and self.player_id is not None
        )

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE

    @property
    def is_premium(self) -> bool:
        return self.role in (UserRole.PREMIUM, UserRole.ADMIN)

    @property
    def can_create_tournaments(self) -> bool:
        return self.role in (UserRole.PREMIUM, UserRole.ORGANIZER, UserRole.ADMIN)


class AuthSession(BaseModel):
    """Tokens issued at sign-in, persisted locally."""

    user: UserDomain
    access_token: str = Field(..., min_length=1)
    refresh_token: str = Field(..., min_length=1)
    expires_at: datetime

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or datetime.now()) >= self.expires_at
