"""
Интеграция отправки email: провайдеры Resend и AWS SES, EmailManager
(основной + резервный провайдер), шаблоны писем и AuthEmailService.
"""
from pashumitra.integrations.email.background import deliver_in_background
from pashumitra.integrations.email.errors import (
    EmailConfigurationError,
    EmailError,
    EmailTransportError,
    EmailValidationError,
)
from pashumitra.integrations.email.factory import get_email_manager
from pashumitra.integrations.email.manager import EmailManager
from pashumitra.integrations.email.ports import EmailSender
from pashumitra.integrations.email.service import AuthEmailService, get_auth_email_service
from pashumitra.integrations.email.types import (
    ConnectionReport,
    DeliveryResult,
    EmailStatus,
    Message,
    RecipientProfile,
)

__all__ = [
    "AuthEmailService",
    "get_auth_email_service",
    "EmailManager",
    "get_email_manager",
    "EmailSender",
    "deliver_in_background",
    "Message",
    "RecipientProfile",
    "DeliveryResult",
    "EmailStatus",
    "ConnectionReport",
    "EmailError",
    "EmailValidationError",
    "EmailConfigurationError",
    "EmailTransportError",
]
