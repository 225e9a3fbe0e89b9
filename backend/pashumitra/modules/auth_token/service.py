import enum
import hashlib
import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from pashumitra.db.base import as_utc
from pashumitra.modules.auth_token.model import AuthToken


class TokenStatus(str, enum.Enum):
    VALID = "valid"
    NOT_FOUND = "not_found"
    EXPIRED = "expired"
    USED = "used"


@dataclass(frozen=True)
class TokenLookup:
    """Результат поиска токена: статус и сама запись (если найдена)."""

    status: TokenStatus
    token: AuthToken | None = None


def generate_token() -> str:
    """Генерировать безопасный одноразовый токен."""
    return secrets.token_urlsafe(32)


def hash_token(token: str) -> str:
    """
    Хешировать токен для хранения в БД.

    sha256, а не bcrypt: хеш детерминированный, поэтому токен находится
    одним запросом по token_hash.
    """
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


async def issue_token(
    session: AsyncSession,
    user_id: uuid.UUID,
    purpose: str,
    ttl: timedelta,
) -> tuple[AuthToken, str]:
    """
    Создать одноразовый токен (verify_email / reset_password).
    Ранее выданные неиспользованные токены того же назначения гасятся.

    Returns:
        tuple: (AuthToken объект, raw_token строка)
    """
    now = datetime.now(timezone.utc)
    await session.execute(
        update(AuthToken)
        .where(
            AuthToken.user_id == user_id,
            AuthToken.purpose == purpose,
            AuthToken.used_at.is_(None),
        )
        .values(expires_at=now)
    )

    raw_token = generate_token()
    auth_token = AuthToken(
        user_id=user_id,
        token_hash=hash_token(raw_token),
        purpose=purpose,
        expires_at=now + ttl,
        used_at=None,
    )
    session.add(auth_token)
    await session.flush()
    await session.refresh(auth_token)

    return auth_token, raw_token


async def lookup_token(
    session: AsyncSession,
    raw_token: str,
    purpose: str,
    for_update: bool = False,
) -> TokenLookup:
    """
    Найти токен по сырой строке одним запросом и определить его статус.

    NOT_FOUND — такого токена нет; USED — уже использован; EXPIRED — срок истёк.
    Статус определяется по записи самого токена (used_at, expires_at),
    без поиска по другим пользователям.
    for_update=True — SELECT ... FOR UPDATE, защищает от гонки при одновременном погашении.
    """
    stmt = select(AuthToken).where(
        AuthToken.token_hash == hash_token(raw_token),
        AuthToken.purpose == purpose,
    )
    if for_update:
        stmt = stmt.with_for_update()
    result = await session.execute(stmt)
    auth_token = result.scalar_one_or_none()
    if auth_token is None:
        return TokenLookup(TokenStatus.NOT_FOUND)
    if auth_token.used_at is not None:
        return TokenLookup(TokenStatus.USED, auth_token)
    if as_utc(auth_token.expires_at) <= datetime.now(timezone.utc):
        return TokenLookup(TokenStatus.EXPIRED, auth_token)
    return TokenLookup(TokenStatus.VALID, auth_token)


async def consume_token(session: AsyncSession, auth_token: AuthToken) -> None:
    """Пометить токен как использованный."""
    auth_token.used_at = datetime.now(timezone.utc)
    await session.flush()
