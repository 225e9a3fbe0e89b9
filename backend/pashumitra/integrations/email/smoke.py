"""
Smoke-проверка email: конфигурация, статус провайдеров, пробная отправка,
письмо подтверждения на тестового пользователя.
Реальные HTTP-вызовы к провайдерам. Запуск: python -m pashumitra.integrations.email.smoke
"""
import asyncio
import sys

import httpx

TEST_USER_NAME = "Test User"
TEST_USER_EMAIL = "test@example.com"
TEST_TOKEN = "test-verification-token-123"


async def check_email_smoke() -> bool:
    """
    Печатает конфигурацию и статус, выполняет test_connection и отправку
    письма подтверждения. Возвращает True, если основной провайдер (или резервный) принял письма.
    """
    from pashumitra.core.config import get_settings
    from pashumitra.integrations.email import AuthEmailService, RecipientProfile, get_email_manager

    settings = get_settings()
    print("Environment:")
    print(f"  EMAIL_SERVICE: {settings.EMAIL_SERVICE}")
    print(f"  EMAIL_FROM: {settings.EMAIL_FROM}")
    print(f"  FRONTEND_URL: {settings.FRONTEND_URL}")

    async with httpx.AsyncClient() as client:
        manager = get_email_manager(client, settings)
        status = manager.status()
        print("Status:")
        print(f"  primary: {status.primary_service}, fallback: {status.fallback_service}")
        print(f"  resend configured: {status.resend_configured}")
        print(f"  ses configured: {status.ses_configured}")

        report = await manager.test_connection()
        print(f"Connection test: {report.model_dump_json(indent=2)}")

        service = AuthEmailService(manager, settings.email_branding)
        result = await service.send_verification_email(
            RecipientProfile(name=TEST_USER_NAME, email=TEST_USER_EMAIL),
            TEST_TOKEN,
        )
        print(f"Verification email: {result.model_dump_json(indent=2)}")

    connection_ok = report.primary.success or bool(report.fallback and report.fallback.success)
    if not connection_ok:
        print("FAIL: no email provider accepted the connection test message")
        return False
    if not result.success:
        print(f"FAIL: verification email was not sent: {result.error_detail}")
        return False
    print(f"OK: email delivery works via {result.service_used}")
    return True


if __name__ == "__main__":
    if not asyncio.run(check_email_smoke()):
        sys.exit(1)
