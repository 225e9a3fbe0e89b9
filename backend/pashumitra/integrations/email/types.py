"""
Типы email-интеграции: письмо, получатель, результат доставки, статус провайдеров.
"""
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pashumitra.integrations.email.errors import EmailValidationError

EmailServiceName = Literal["resend", "ses"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecipientProfile(BaseModel):
    """Получатель письма: то, что шаблонам нужно знать о пользователе."""

    model_config = ConfigDict(frozen=True)

    name: str
    email: str


class Message(BaseModel):
    """
    Каноническое письмо: получатели, тема, HTML и необязательный текст.

    Непустоту полей модель не проверяет, это делает адаптер перед отправкой
    (см. Message.validate_for_sending), чтобы некорректное письмо превращалось
    в неуспешный DeliveryResult, а не в исключение у вызывающего кода.
    """

    model_config = ConfigDict(frozen=True)

    recipients: tuple[str, ...] = ()
    subject: str = ""
    html_body: str = ""
    text_body: str | None = None

    @field_validator("recipients", mode="before")
    @classmethod
    def normalize_recipients(cls, v: str | Iterable[str] | None) -> tuple[str, ...]:
        """Одна строка -> кортеж из одного адреса; дубли и пустые адреса отбрасываются, порядок сохраняется."""
        if v is None:
            return ()
        if isinstance(v, str):
            v = [v]
        seen: dict[str, None] = {}
        for address in v:
            address = (address or "").strip()
            if address:
                seen.setdefault(address, None)
        return tuple(seen)

    def validate_for_sending(self) -> None:
        """
        Проверить, что письмо можно отправлять.

        Raises:
            EmailValidationError: нет получателей, пустая тема или пустой HTML.
        """
        missing = []
        if not self.recipients:
            missing.append("to")
        if not self.subject.strip():
            missing.append("subject")
        if not self.html_body.strip():
            missing.append("html")
        if missing:
            raise EmailValidationError(
                f"Missing required email parameters: {', '.join(missing)}"
            )


class DeliveryResult(BaseModel):
    """Нормализованный результат отправки, одинаковый для любого провайдера."""

    model_config = ConfigDict(frozen=True)

    success: bool
    service_used: EmailServiceName
    provider_message_id: str | None = None
    error_detail: str | None = None
    timestamp: datetime = Field(default_factory=_utcnow)

    @classmethod
    def ok(cls, service: EmailServiceName, provider_message_id: str) -> "DeliveryResult":
        return cls(success=True, service_used=service, provider_message_id=provider_message_id)

    @classmethod
    def failed(cls, service: EmailServiceName, error_detail: str) -> "DeliveryResult":
        return cls(success=False, service_used=service, error_detail=error_detail)


class EmailStatus(BaseModel):
    """Какие провайдеры настроены (наличие ключей, не доступность)."""

    primary_service: EmailServiceName
    fallback_service: EmailServiceName
    resend_configured: bool
    ses_configured: bool
    timestamp: datetime = Field(default_factory=_utcnow)


class ConnectionReport(BaseModel):
    """Результат пробной отправки через основной и резервный провайдеры."""

    primary: DeliveryResult
    fallback: DeliveryResult | None = None
    timestamp: datetime = Field(default_factory=_utcnow)
