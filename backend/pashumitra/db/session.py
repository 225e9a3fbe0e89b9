"""
Асинхронный engine SQLAlchemy и dependency get_db для роутеров.
"""
import os
from collections.abc import AsyncGenerator
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

load_dotenv(Path(__file__).parent.parent.parent / ".env")

# Синхронные схемы URL (как их отдаёт хостинг) -> асинхронный драйвер
_ASYNC_SCHEMES = {
    "postgres://": "postgresql+asyncpg://",
    "postgresql://": "postgresql+asyncpg://",
    "postgresql+psycopg://": "postgresql+asyncpg://",
    "sqlite://": "sqlite+aiosqlite://",
}


def to_async_url(url: str) -> str:
    """Заменить схему URL на асинхронный драйвер; уже асинхронный URL не меняется."""
    for scheme, async_scheme in _ASYNC_SCHEMES.items():
        if url.startswith(scheme):
            return async_scheme + url[len(scheme):]
    return url


DATABASE_URL = os.getenv("DATABASE_URL", "").strip()
if not DATABASE_URL:
    raise ValueError("DATABASE_URL is not set")
DATABASE_URL = to_async_url(DATABASE_URL)

engine = create_async_engine(
    DATABASE_URL,
    echo=os.getenv("DB_ECHO", "").strip().lower() in ("1", "true", "yes"),
    pool_pre_ping=True,
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Сессия на время запроса.

    Обработчики сами делают commit там, где важен порядок (например, до отправки письма);
    здесь фиксируется остаток, а при исключении всё откатывается.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
