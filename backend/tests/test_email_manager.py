"""
EmailManager: основной провайдер, одна попытка через резервный, статус, test_connection.
"""
import logging

import httpx
import pytest
from pydantic import SecretStr

from pashumitra.core.config import Settings
from pashumitra.integrations.email import (
    DeliveryResult,
    EmailConfigurationError,
    EmailManager,
    Message,
    get_email_manager,
)
from pashumitra.integrations.email.background import deliver_and_log


@pytest.fixture
def message() -> Message:
    return Message(recipients=("ravi@pashumitra.in",), subject="Hello", html_body="<p>Hi</p>")


@pytest.mark.asyncio
async def test_primary_success_skips_fallback(email_manager, resend_fake, ses_fake, message) -> None:
    result = await email_manager.dispatch(message)

    assert result.success is True
    assert result.service_used == "resend"
    assert result.provider_message_id == "resend-1"
    assert len(resend_fake.calls) == 1
    assert ses_fake.calls == []


@pytest.mark.asyncio
async def test_primary_failure_falls_back_once(email_manager, resend_fake, ses_fake, message) -> None:
    resend_fake.fail = True

    result = await email_manager.dispatch(message)

    assert result.success is True
    assert result.service_used == "ses"
    assert len(resend_fake.calls) == 1
    assert len(ses_fake.calls) == 1
    assert ses_fake.calls[0] == message


@pytest.mark.asyncio
async def test_both_failing_returns_fallback_error(email_manager, resend_fake, ses_fake, message) -> None:
    resend_fake.fail = True
    ses_fake.fail = True

    result = await email_manager.dispatch(message)

    assert result.success is False
    assert result.service_used == "ses"
    assert result.error_detail == "AWS SES is unavailable"
    assert len(resend_fake.calls) == 1
    assert len(ses_fake.calls) == 1


@pytest.mark.asyncio
async def test_unconfigured_primary_falls_back(email_manager, resend_fake, ses_fake, message) -> None:
    resend_fake.configured = False

    result = await email_manager.dispatch(message)

    assert result.success is True
    assert result.service_used == "ses"
    assert resend_fake.calls == []


@pytest.mark.asyncio
async def test_ses_primary_is_tried_only_once(resend_fake, ses_fake, message) -> None:
    manager = EmailManager("ses", {"resend": resend_fake, "ses": ses_fake})
    ses_fake.fail = True

    result = await manager.dispatch(message)

    assert manager.has_distinct_fallback is False
    assert result.success is False
    assert len(ses_fake.calls) == 1
    assert resend_fake.calls == []


def test_unknown_primary_is_rejected(resend_fake, ses_fake) -> None:
    with pytest.raises(EmailConfigurationError):
        EmailManager("sendgrid", {"resend": resend_fake, "ses": ses_fake})


def test_status_reports_configured_providers(email_manager, resend_fake) -> None:
    resend_fake.configured = False

    status = email_manager.status()

    assert status.primary_service == "resend"
    assert status.fallback_service == "ses"
    assert status.resend_configured is False
    assert status.ses_configured is True
    assert resend_fake.calls == []


@pytest.mark.asyncio
async def test_connection_report_covers_both_providers(email_manager, resend_fake, ses_fake) -> None:
    ses_fake.fail = True

    report = await email_manager.test_connection()

    assert report.primary.success is True
    assert report.fallback is not None
    assert report.fallback.success is False
    assert resend_fake.calls[0].recipients == ("noreply@pashumitra.in",)
    assert resend_fake.calls[0].subject == "Resend Connection Test"


@pytest.mark.asyncio
async def test_connection_report_without_distinct_fallback(resend_fake, ses_fake) -> None:
    manager = EmailManager("ses", {"resend": resend_fake, "ses": ses_fake})

    report = await manager.test_connection()

    assert report.primary.service_used == "ses"
    assert report.fallback is None
    assert resend_fake.calls == []


@pytest.mark.asyncio
async def test_factory_builds_manager_from_settings() -> None:
    settings = Settings()
    settings.EMAIL_SERVICE = "resend"
    settings.RESEND_API_KEY = SecretStr("re_key")
    settings.AWS_ACCESS_KEY_ID = None
    settings.AWS_SECRET_ACCESS_KEY = None

    async with httpx.AsyncClient() as client:
        manager = get_email_manager(client, settings)

    status = manager.status()
    assert manager.primary_service == "resend"
    assert status.resend_configured is True
    assert status.ses_configured is False


@pytest.mark.asyncio
async def test_background_delivery_logs_failure(caplog) -> None:
    async def send(*_args) -> DeliveryResult:
        return DeliveryResult.failed("ses", "AWS SES is unavailable")

    with caplog.at_level(logging.WARNING, logger="pashumitra.integrations.email.background"):
        await deliver_and_log(send, description="welcome email to ravi@pashumitra.in")

    assert "Failed to send welcome email to ravi@pashumitra.in via ses" in caplog.text


@pytest.mark.asyncio
async def test_background_delivery_swallows_exceptions(caplog) -> None:
    async def send(*_args) -> DeliveryResult:
        raise RuntimeError("boom")

    with caplog.at_level(logging.ERROR, logger="pashumitra.integrations.email.background"):
        await deliver_and_log(send, description="verification email")

    assert "Failed to send verification email" in caplog.text


@pytest.mark.asyncio
async def test_lifespan_closes_http_client_on_unknown_email_service(monkeypatch) -> None:
    from pashumitra import main

    settings = Settings()
    settings.EMAIL_SERVICE = "sendgrid"
    clients: list[httpx.AsyncClient] = []

    class RecordingClient(httpx.AsyncClient):
        def __init__(self, *args, **kwargs) -> None:
            super().__init__(*args, **kwargs)
            clients.append(self)

    monkeypatch.setattr(main, "get_settings", lambda: settings)
    monkeypatch.setattr(main.httpx, "AsyncClient", RecordingClient)

    with pytest.raises(EmailConfigurationError):
        async with main.lifespan(main.app):
            pass

    assert len(clients) == 1
    assert clients[0].is_closed
