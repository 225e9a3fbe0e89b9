from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Базовый класс ORM-моделей."""


def as_utc(value: datetime) -> datetime:
    """SQLite возвращает naive datetime даже для DateTime(timezone=True); считаем его UTC."""
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
