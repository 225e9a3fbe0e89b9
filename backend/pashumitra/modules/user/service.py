import logging
import uuid
from datetime import datetime, timedelta, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from pashumitra.db.base import as_utc
from pashumitra.integrations.email.types import RecipientProfile
from pashumitra.modules.user.model import User
from passlib.context import CryptContext

logger = logging.getLogger(__name__)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

PROFILE_FIELDS = ("name", "phone", "location")
# null в этих полях очищает значение; name обязателен и null игнорирует
NULLABLE_PROFILE_FIELDS = ("phone", "location")


def normalize_email(email: str) -> str:
    return email.strip().lower()


async def get_by_id(session: AsyncSession, user_id: uuid.UUID) -> User | None:
    """Получить пользователя по id."""
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_by_email(session: AsyncSession, email: str) -> User | None:
    """Получить пользователя по email (без учёта регистра)."""
    result = await session.execute(select(User).where(User.email == normalize_email(email)))
    return result.scalar_one_or_none()


async def create_user(
    session: AsyncSession,
    name: str,
    email: str,
    hashed_password: str,
    phone: str | None = None,
    role: str = "user",
    location: str | None = None,
) -> User:
    """Создать пользователя с неподтверждённым email."""
    user = User(
        name=name.strip(),
        email=normalize_email(email),
        hashed_password=hashed_password,
        phone=phone,
        role=role,
        location=location,
        email_verified_at=None,
        is_active=True,  # Пользователь активен, но email не подтверждён
        login_attempts=0,
    )
    session.add(user)
    await session.flush()  # Получаем ID пользователя
    await session.refresh(user)
    return user


async def confirm_email(session: AsyncSession, user: User) -> User:
    """Установить email_verified_at (идемпотентно: не перезаписывает, если уже установлен)."""
    if user.email_verified_at is None:
        user.email_verified_at = datetime.now(timezone.utc)
        await session.flush()
    return user


def is_locked(user: User, now: datetime | None = None) -> bool:
    """Заблокирован ли вход после серии неудачных попыток."""
    if user.lock_until is None:
        return False
    now = now or datetime.now(timezone.utc)
    return as_utc(user.lock_until) > now


async def register_failed_login(
    session: AsyncSession,
    user: User,
    max_attempts: int,
    lock_minutes: int,
) -> None:
    """
    Увеличить счётчик неудачных попыток.
    После max_attempts подряд вход блокируется на lock_minutes, счётчик сбрасывается.
    """
    now = datetime.now(timezone.utc)
    if user.lock_until is not None and as_utc(user.lock_until) <= now:
        # Блокировка истекла, счёт начинается заново
        user.lock_until = None
        user.login_attempts = 0
    user.login_attempts += 1
    if user.login_attempts >= max_attempts:
        user.lock_until = now + timedelta(minutes=lock_minutes)
        user.login_attempts = 0
        logger.warning(
            "Account locked after %s failed login attempts: %s (user_id: %s)",
            max_attempts,
            user.email,
            user.id,
        )
    await session.flush()


async def register_successful_login(session: AsyncSession, user: User) -> None:
    """Сбросить счётчик неудачных попыток и отметить время входа."""
    user.login_attempts = 0
    user.lock_until = None
    user.last_login_at = datetime.now(timezone.utc)
    await session.flush()


async def update_profile(session: AsyncSession, user: User, updates: dict) -> list[str]:
    """
    Обновить разрешённые поля профиля. Возвращает список изменённых полей.

    updates содержит только переданные клиентом поля (model_dump(exclude_unset=True)).
    """
    changed = []
    for field in PROFILE_FIELDS:
        if field not in updates:
            continue
        if updates[field] is not None or field in NULLABLE_PROFILE_FIELDS:
            setattr(user, field, updates[field])
            changed.append(field)
    if changed:
        await session.flush()
        await session.refresh(user)
    return changed


async def set_password(session: AsyncSession, user: User, password: str) -> None:
    """Установить новый пароль и снять блокировку входа."""
    user.hashed_password = hash_password(password)
    user.login_attempts = 0
    user.lock_until = None
    await session.flush()


def to_profile(user: User) -> RecipientProfile:
    """Имя и email пользователя для шаблонов писем."""
    return RecipientProfile(name=user.name, email=user.email)


def hash_password(password: str) -> str:
    """Хешировать пароль с помощью passlib/bcrypt."""
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """
    Проверить пароль против хеша.

    Args:
        password: Пароль в открытом виде
        hashed: Хешированный пароль из БД

    Returns:
        True если пароль совпадает, False иначе.
    """
    return pwd_context.verify(password, hashed)
