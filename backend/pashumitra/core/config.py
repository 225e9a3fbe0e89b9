"""
Конфигурация приложения из переменных окружения (.env).
"""
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from pydantic import SecretStr

# Загружаем .env из корня backend
_env_path = Path(__file__).resolve().parent.parent.parent / ".env"
load_dotenv(_env_path)


def _str(key: str, default: str | None = None) -> str:
    value = os.getenv(key)
    if value is not None:
        return value.strip()
    if default is not None:
        return default
    return ""


def _int(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _float(key: str, default: float) -> float:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


def _secret(key: str) -> SecretStr | None:
    """Секрет из env; пустое значение = провайдер не настроен."""
    value = _str(key)
    return SecretStr(value) if value else None


@dataclass(frozen=True)
class EmailProviderConfig:
    """
    Конфигурация email-провайдеров (Resend, AWS SES).

    Собирается один раз при старте и не меняется до конца жизни процесса.
    Отсутствие ключа означает, что провайдер не настроен.
    """

    primary_service: str
    from_email: str
    from_name: str
    frontend_base_url: str
    resend_api_key: SecretStr | None = None
    resend_base_url: str = "https://api.resend.com"
    aws_access_key_id: SecretStr | None = None
    aws_secret_access_key: SecretStr | None = None
    aws_region: str = "us-east-1"
    timeout_s: float = 10.0

    @property
    def resend_configured(self) -> bool:
        return self.resend_api_key is not None

    @property
    def ses_configured(self) -> bool:
        return self.aws_access_key_id is not None and self.aws_secret_access_key is not None

    @property
    def sender(self) -> str:
        """Адрес отправителя в виде "Name <email>"."""
        if self.from_name:
            return f"{self.from_name} <{self.from_email}>"
        return self.from_email


@dataclass(frozen=True)
class EmailBranding:
    """Данные для шаблонов писем: название портала, фронтенд, адрес поддержки."""

    app_name: str
    frontend_base_url: str
    support_email: str


class Settings:
    """Настройки приложения."""

    # Email: основной сервис "resend" | "ses"; fallback всегда SES
    EMAIL_SERVICE: str = _str("EMAIL_SERVICE", "ses").lower()

    # Отправитель писем
    EMAIL_FROM: str = _str("EMAIL_FROM", "onboarding@resend.dev")
    EMAIL_FROM_NAME: str = _str("EMAIL_FROM_NAME", "PashuMitra Portal")
    EMAIL_TIMEOUT_S: float = _float("EMAIL_TIMEOUT_S", 10.0)

    # Resend
    RESEND_API_KEY: SecretStr | None = _secret("RESEND_API_KEY")
    RESEND_BASE_URL: str = _str("RESEND_BASE_URL", "https://api.resend.com")

    # AWS SES
    AWS_ACCESS_KEY_ID: SecretStr | None = _secret("AWS_ACCESS_KEY_ID")
    AWS_SECRET_ACCESS_KEY: SecretStr | None = _secret("AWS_SECRET_ACCESS_KEY")
    AWS_REGION: str = _str("AWS_REGION", "us-east-1")

    # Frontend (для ссылок в письмах)
    FRONTEND_URL: str = _str("FRONTEND_URL", "http://localhost:3000")

    # JWT для access token при входе
    JWT_SECRET: str = _str("JWT_SECRET", "change-me-in-production")
    JWT_ALGORITHM: str = _str("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = _int("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24 * 7)  # 7 дней

    # Одноразовые токены
    EMAIL_VERIFICATION_EXPIRE_HOURS: int = _int("EMAIL_VERIFICATION_EXPIRE_HOURS", 24)
    PASSWORD_RESET_EXPIRE_MINUTES: int = _int("PASSWORD_RESET_EXPIRE_MINUTES", 10)

    # Блокировка после неудачных попыток входа
    MAX_LOGIN_ATTEMPTS: int = _int("MAX_LOGIN_ATTEMPTS", 5)
    ACCOUNT_LOCK_MINUTES: int = _int("ACCOUNT_LOCK_MINUTES", 120)

    @property
    def email_provider_config(self) -> EmailProviderConfig:
        """Конфигурация email-провайдеров для EmailManager."""
        return EmailProviderConfig(
            primary_service=self.EMAIL_SERVICE,
            from_email=self.EMAIL_FROM,
            from_name=self.EMAIL_FROM_NAME,
            frontend_base_url=self.FRONTEND_URL.rstrip("/"),
            resend_api_key=self.RESEND_API_KEY,
            resend_base_url=self.RESEND_BASE_URL.rstrip("/"),
            aws_access_key_id=self.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=self.AWS_SECRET_ACCESS_KEY,
            aws_region=self.AWS_REGION,
            timeout_s=self.EMAIL_TIMEOUT_S,
        )

    @property
    def email_branding(self) -> EmailBranding:
        """Данные для шаблонов писем."""
        return EmailBranding(
            app_name=self.EMAIL_FROM_NAME or "PashuMitra Portal",
            frontend_base_url=self.FRONTEND_URL.rstrip("/"),
            support_email=self.EMAIL_FROM,
        )


# Глобальный экземпляр конфига (инициализируется при первом импорте)
_settings: Settings | None = None


def get_settings() -> Settings:
    """Возвращает экземпляр настроек (singleton)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
