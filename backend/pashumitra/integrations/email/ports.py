"""
Интерфейс отправки email (port) и общая граница адаптеров.
"""
import logging
from abc import ABC, abstractmethod

from pashumitra.core.config import EmailProviderConfig
from pashumitra.integrations.email.errors import (
    EmailConfigurationError,
    EmailError,
    EmailTransportError,
)
from pashumitra.integrations.email.types import DeliveryResult, EmailServiceName, Message

logger = logging.getLogger(__name__)

CONNECTION_TEST_HTML = "<p>This is a connection test email.</p>"
CONNECTION_TEST_TEXT = "This is a connection test email."


class EmailSender(ABC):
    """
    Абстракция провайдера транзакционных писем.

    send() — единственная граница адаптера: валидирует письмо, проверяет
    наличие ключей и вызывает _deliver(). Любая ошибка провайдера превращается
    в DeliveryResult(success=False) и дальше не пробрасывается.
    Конкретный провайдер реализует только _deliver() и is_configured().
    """

    service: EmailServiceName
    display_name: str

    def __init__(self, config: EmailProviderConfig) -> None:
        self._config = config

    @abstractmethod
    def is_configured(self) -> bool:
        """Есть ли у провайдера ключи (без сетевых вызовов)."""
        ...

    @abstractmethod
    async def _deliver(self, message: Message) -> str:
        """
        Выполнить один сетевой вызов к провайдеру.

        Returns:
            provider_message_id.

        Raises:
            EmailTransportError: провайдер отклонил запрос или сеть недоступна.
        """
        ...

    async def send(self, message: Message) -> DeliveryResult:
        """Отправить письмо. Никогда не бросает: ошибка -> success=False."""
        to = ", ".join(message.recipients)
        try:
            message.validate_for_sending()
            if not self.is_configured():
                raise EmailConfigurationError(f"{self.display_name} is not configured")
            logger.info(
                "Sending email via %s to=%s subject=%s",
                self.display_name,
                to,
                message.subject,
            )
            message_id = await self._deliver(message)
        except EmailError as e:
            logger.error(
                "Failed to send email via %s to=%s subject=%s: %s",
                self.display_name,
                to,
                message.subject,
                e,
            )
            return DeliveryResult.failed(self.service, str(e))
        except Exception as e:
            logger.exception(
                "Unexpected error sending email via %s to=%s",
                self.display_name,
                to,
            )
            return DeliveryResult.failed(self.service, f"Unexpected error: {e}")

        logger.info(
            "Email sent via %s message_id=%s to=%s",
            self.display_name,
            message_id,
            to,
        )
        return DeliveryResult.ok(self.service, message_id)

    async def test_connection(self) -> DeliveryResult:
        """Пробное письмо самому себе (from_email): проверка, что провайдер принимает запросы."""
        test_message = Message(
            recipients=(self._config.from_email,),
            subject=f"{self.display_name} Connection Test",
            html_body=CONNECTION_TEST_HTML,
            text_body=CONNECTION_TEST_TEXT,
        )
        return await self.send(test_message)


def require_message_id(service: str, message_id: object) -> str:
    """Успешный ответ без идентификатора письма считаем ошибкой провайдера."""
    if not message_id:
        raise EmailTransportError(f"{service} response did not include a message id")
    return str(message_id)
