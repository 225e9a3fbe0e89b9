"""
Фабрика EmailManager: провайдеры Resend и SES + выбор основного по EMAIL_SERVICE.
"""
import httpx

from pashumitra.core.config import Settings, get_settings
from pashumitra.integrations.email.manager import EmailManager
from pashumitra.integrations.email.ports import EmailSender
from pashumitra.integrations.email.senders.resend_sender import ResendEmailSender
from pashumitra.integrations.email.senders.ses_sender import SESEmailSender


def get_email_senders(
    settings: Settings,
    http_client: httpx.AsyncClient,
) -> dict[str, EmailSender]:
    """Все известные провайдеры (настроенные или нет), ключ — имя сервиса."""
    config = settings.email_provider_config
    return {
        "resend": ResendEmailSender(config, http_client),
        "ses": SESEmailSender(config),
    }


def get_email_manager(
    http_client: httpx.AsyncClient,
    settings: Settings | None = None,
) -> EmailManager:
    """
    Собрать EmailManager из настроек.

    - EMAIL_SERVICE="resend" — Resend, fallback на SES
    - EMAIL_SERVICE="ses" (по умолчанию) — только SES

    Неизвестное значение EMAIL_SERVICE — EmailConfigurationError при старте.
    Для добавления нового провайдера: реализовать EmailSender в senders/
    и добавить его в get_email_senders.
    """
    if settings is None:
        settings = get_settings()
    return EmailManager(settings.EMAIL_SERVICE, get_email_senders(settings, http_client))
