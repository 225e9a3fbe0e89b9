"""JWT access token: выдаётся после входа, подтверждения email и сброса пароля."""
import uuid
from datetime import datetime, timezone, timedelta

import jwt

from pashumitra.core.config import Settings

ACCESS_TOKEN_TYPE = "access"
REQUIRED_CLAIMS = ["sub", "exp", "type"]


def create_access_token(
    user_id: uuid.UUID,
    email: str,
    role: str,
    settings: Settings,
) -> str:
    """Подписать токен с sub, email, role; срок жизни ACCESS_TOKEN_EXPIRE_MINUTES."""
    issued_at = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "type": ACCESS_TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> dict:
    """
    Проверить подпись и срок, вернуть payload.

    Raises:
        jwt.InvalidTokenError: подпись неверна, токен просрочен или нет обязательных claims.
    """
    return jwt.decode(
        token,
        settings.JWT_SECRET,
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": REQUIRED_CLAIMS},
    )
