"""Схемы API для пользователя: публичное представление, профиль, смена пароля."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class UserPublic(BaseModel):
    """Пользователь без пароля и служебных полей (попытки входа, блокировка)."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    email: str
    phone: str | None = None
    role: str
    location: str | None = None
    email_verified: bool
    created_at: datetime | None = None


class ProfileUpdateRequest(BaseModel):
    """Тело PUT /me/profile: изменяются только переданные поля."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    phone: str | None = Field(default=None, max_length=32)
    location: str | None = Field(default=None, max_length=255)


class PasswordChangeRequest(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=100)
    new_password: str = Field(..., min_length=8, max_length=100)
