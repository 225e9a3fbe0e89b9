"""
EmailManager: выбор основного провайдера и одна попытка через резервный.
"""
import logging
from collections.abc import Mapping

from pashumitra.integrations.email.errors import EmailConfigurationError
from pashumitra.integrations.email.ports import EmailSender
from pashumitra.integrations.email.types import (
    ConnectionReport,
    DeliveryResult,
    EmailServiceName,
    EmailStatus,
    Message,
)

logger = logging.getLogger(__name__)

FALLBACK_SERVICE: EmailServiceName = "ses"


class EmailManager:
    """
    Маршрутизация писем между провайдерами.

    primary берётся из конфигурации, fallback всегда SES. Если основной
    провайдер вернул success=False и он не совпадает с резервным, письмо
    отправляется ещё раз через резервный. Это единственный «ретрай»:
    без backoff и очередей. Решение принимается только по флагу success.

    Пример использования:

        manager = EmailManager("resend", {"resend": resend_sender, "ses": ses_sender})
        result = await manager.dispatch(message)
        print(result.success, result.service_used, result.provider_message_id)
    """

    def __init__(
        self,
        primary_service: str,
        senders: Mapping[str, EmailSender],
    ) -> None:
        primary = (primary_service or "").strip().lower()
        if primary not in senders:
            raise EmailConfigurationError(f"Unknown email service: {primary_service!r}")
        if FALLBACK_SERVICE not in senders:
            raise EmailConfigurationError(f"Fallback email service {FALLBACK_SERVICE!r} is not registered")
        self._senders = dict(senders)
        self._primary: EmailServiceName = primary  # type: ignore[assignment]
        self._fallback: EmailServiceName = FALLBACK_SERVICE
        logger.info("Email manager initialized with primary service: %s", self._primary)

    @property
    def primary_service(self) -> EmailServiceName:
        return self._primary

    @property
    def fallback_service(self) -> EmailServiceName:
        return self._fallback

    @property
    def has_distinct_fallback(self) -> bool:
        return self._primary != self._fallback

    async def dispatch(self, message: Message) -> DeliveryResult:
        """Отправить через основной провайдер, при неудаче — один раз через резервный."""
        result = await self._senders[self._primary].send(message)

        if not result.success and self.has_distinct_fallback:
            logger.warning(
                "Primary email service (%s) failed: %s; trying fallback (%s)",
                self._primary,
                result.error_detail,
                self._fallback,
            )
            result = await self._senders[self._fallback].send(message)

        if result.success:
            logger.info("Email delivered via %s", result.service_used)
        else:
            logger.error("All email services failed: %s", result.error_detail)
        return result

    def status(self) -> EmailStatus:
        """Какие провайдеры настроены. Без сетевых вызовов."""
        return EmailStatus(
            primary_service=self._primary,
            fallback_service=self._fallback,
            resend_configured=self._is_configured("resend"),
            ses_configured=self._is_configured("ses"),
        )

    async def test_connection(self) -> ConnectionReport:
        """Пробная отправка через основной и (если отличается) резервный провайдер."""
        logger.info("Testing email service connections...")
        primary = await self._senders[self._primary].test_connection()
        fallback = None
        if self.has_distinct_fallback:
            fallback = await self._senders[self._fallback].test_connection()
        report = ConnectionReport(primary=primary, fallback=fallback)
        logger.info(
            "Email connection test completed: primary=%s fallback=%s",
            primary.success,
            fallback.success if fallback else None,
        )
        return report

    def _is_configured(self, service: str) -> bool:
        sender = self._senders.get(service)
        return sender is not None and sender.is_configured()
