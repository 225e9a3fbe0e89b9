"""
Общие фикстуры: SQLite в памяти, приложение с подменёнными зависимостями,
email-провайдеры-заглушки (запоминают письма, умеют имитировать отказ).
"""
import os

# До импорта приложения: session.py требует DATABASE_URL при импорте
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-0123456789abcdef0123456789")
os.environ.setdefault("LOG_TO_FILE", "false")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from pashumitra.core.config import EmailBranding, EmailProviderConfig
from pashumitra.db.base import Base
from pashumitra.db.session import get_db
from pashumitra.integrations.email import (
    AuthEmailService,
    EmailManager,
    EmailSender,
    EmailTransportError,
    Message,
    get_auth_email_service,
)
from pashumitra.main import app


class FakeSender(EmailSender):
    """Провайдер без сети: запоминает каждую попытку, при fail=True отвечает ошибкой."""

    def __init__(self, config: EmailProviderConfig, service: str, display_name: str) -> None:
        super().__init__(config)
        self.service = service
        self.display_name = display_name
        self.fail = False
        self.configured = True
        self.calls: list[Message] = []

    def is_configured(self) -> bool:
        return self.configured

    async def _deliver(self, message: Message) -> str:
        self.calls.append(message)
        if self.fail:
            raise EmailTransportError(f"{self.display_name} is unavailable")
        return f"{self.service}-{len(self.calls)}"


@pytest.fixture
def provider_config() -> EmailProviderConfig:
    return EmailProviderConfig(
        primary_service="resend",
        from_email="noreply@pashumitra.in",
        from_name="PashuMitra Portal",
        frontend_base_url="http://localhost:3000",
        resend_api_key=SecretStr("re_test_key"),
        aws_access_key_id=SecretStr("AKIATEST"),
        aws_secret_access_key=SecretStr("aws-secret"),
        aws_region="ap-south-1",
        timeout_s=5.0,
    )


@pytest.fixture
def branding() -> EmailBranding:
    return EmailBranding(
        app_name="PashuMitra Portal",
        frontend_base_url="http://localhost:3000",
        support_email="support@pashumitra.in",
    )


@pytest.fixture
def resend_fake(provider_config) -> FakeSender:
    return FakeSender(provider_config, "resend", "Resend")


@pytest.fixture
def ses_fake(provider_config) -> FakeSender:
    return FakeSender(provider_config, "ses", "AWS SES")


@pytest.fixture
def email_manager(resend_fake, ses_fake) -> EmailManager:
    return EmailManager("resend", {"resend": resend_fake, "ses": ses_fake})


@pytest.fixture
def auth_email_service(email_manager, branding) -> AuthEmailService:
    return AuthEmailService(email_manager, branding)


@pytest_asyncio.fixture
async def session_factory():
    """Отдельная БД в памяти на каждый тест; StaticPool держит одно соединение."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory, auth_email_service):
    """HTTP-клиент к приложению (lifespan не вызывается при ASGITransport)."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_auth_email_service] = lambda: auth_email_service
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
