"""
Use-cases для email, связанных с аутентификацией.
"""
import logging

from fastapi import Request

from pashumitra.core.config import EmailBranding
from pashumitra.integrations.email.manager import EmailManager
from pashumitra.integrations.email.templates import (
    build_password_reset,
    build_verification,
    build_welcome,
)
from pashumitra.integrations.email.types import DeliveryResult, RecipientProfile

logger = logging.getLogger(__name__)


class AuthEmailService:
    """Сервис отправки писем, связанных с аутентификацией (приветствие, подтверждение email, сброс пароля)."""

    def __init__(
        self,
        manager: EmailManager,
        branding: EmailBranding,
        verification_expiry_hours: int = 24,
        reset_expiry_minutes: int = 10,
    ) -> None:
        self._manager = manager
        self._branding = branding
        self._verification_expiry_hours = verification_expiry_hours
        self._reset_expiry_minutes = reset_expiry_minutes

    @property
    def manager(self) -> EmailManager:
        return self._manager

    async def send_welcome_email(self, profile: RecipientProfile) -> DeliveryResult:
        """Приветственное письмо."""
        logger.info("Sending welcome email to: %s", profile.email)
        message = build_welcome(profile, branding=self._branding)
        return await self._manager.dispatch(message)

    async def send_verification_email(
        self,
        profile: RecipientProfile,
        token: str,
    ) -> DeliveryResult:
        """
        Отправить письмо с ссылкой подтверждения регистрации.

        Args:
            profile: Имя и email получателя.
            token: Одноразовый токен в открытом виде (в БД хранится только хеш).

        Returns:
            DeliveryResult; при неудаче обоих провайдеров success=False.
        """
        logger.info("Sending verification email to: %s", profile.email)
        message = build_verification(
            profile,
            token,
            branding=self._branding,
            expiry_hours=self._verification_expiry_hours,
        )
        return await self._manager.dispatch(message)

    async def send_password_reset_email(
        self,
        profile: RecipientProfile,
        token: str,
    ) -> DeliveryResult:
        """Письмо со ссылкой сброса пароля."""
        logger.info("Sending password reset email to: %s", profile.email)
        message = build_password_reset(
            profile,
            token,
            branding=self._branding,
            expiry_minutes=self._reset_expiry_minutes,
        )
        return await self._manager.dispatch(message)


def get_auth_email_service(request: Request) -> AuthEmailService:
    """
    Dependency: вернуть AuthEmailService из app.state (регистрируется при старте в lifespan).

    Использование в роутере: auth_email_service: AuthEmailService = Depends(get_auth_email_service).
    """
    return request.app.state.auth_email_service
