"""Роутер пользователя: профиль и смена пароля."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from pashumitra.db.session import get_db
from pashumitra.modules.auth.router import get_current_user
from pashumitra.modules.auth.schemas import MessageResponse
from pashumitra.modules.user.model import User
from pashumitra.modules.user.schemas import PasswordChangeRequest, ProfileUpdateRequest, UserPublic
from pashumitra.modules.user.service import set_password, update_profile, verify_password

router = APIRouter(prefix="/api/v1/users", tags=["users"])

logger = logging.getLogger(__name__)


@router.put("/me/profile", response_model=UserPublic)
async def put_profile(
    body: ProfileUpdateRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> UserPublic:
    """
    Обновить профиль текущего пользователя.
    Меняются только name, phone, location; email и роль через этот роут не меняются.
    """
    changed = await update_profile(db, current_user, body.model_dump(exclude_unset=True))
    await db.commit()
    logger.info("Profile updated: %s (user_id: %s, fields: %s)", current_user.email, current_user.id, changed)
    return UserPublic.model_validate(current_user)


@router.put("/me/password", response_model=MessageResponse)
async def put_password(
    body: PasswordChangeRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    """Сменить пароль: текущий пароль обязателен."""
    if not verify_password(body.current_password, current_user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect",
        )
    await set_password(db, current_user, body.new_password)
    await db.commit()
    logger.info("Password changed: %s (user_id: %s)", current_user.email, current_user.id)
    return MessageResponse(message="Password updated successfully")
