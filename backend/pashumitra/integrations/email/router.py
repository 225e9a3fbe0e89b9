"""
Роутер email: GET /api/v1/email/status, POST /api/v1/email/test (только admin).
"""
from fastapi import APIRouter, Depends

from pashumitra.integrations.email.service import AuthEmailService, get_auth_email_service
from pashumitra.integrations.email.types import ConnectionReport, EmailStatus
from pashumitra.modules.auth.router import require_admin

router = APIRouter(
    prefix="/api/v1/email",
    tags=["email"],
    dependencies=[Depends(require_admin)],
)


@router.get("/status", response_model=EmailStatus)
async def email_status(
    auth_email_service: AuthEmailService = Depends(get_auth_email_service),
) -> EmailStatus:
    """Какие провайдеры настроены (по наличию ключей, без сетевых вызовов)."""
    return auth_email_service.manager.status()


@router.post("/test", response_model=ConnectionReport)
async def email_test(
    auth_email_service: AuthEmailService = Depends(get_auth_email_service),
) -> ConnectionReport:
    """Пробное письмо на EMAIL_FROM через основной и резервный провайдеры."""
    return await auth_email_service.manager.test_connection()
