"""
Шаблоны транзакционных писем: чистые функции profile (+ токен) -> Message.
"""
from pashumitra.integrations.email.templates.password_reset import build_password_reset
from pashumitra.integrations.email.templates.verify_email import build_verification
from pashumitra.integrations.email.templates.welcome import build_welcome

__all__ = ["build_welcome", "build_verification", "build_password_reset"]
