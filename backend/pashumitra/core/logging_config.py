import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Загружаем .env файл
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(env_path)

LOG_DIR = Path(__file__).parent.parent.parent / "logs"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Сторонние библиотеки: тело запросов к провайдерам и SQL в лог не пишем
QUIET_LOGGERS = {
    "uvicorn": logging.INFO,
    "uvicorn.access": logging.INFO,
    "sqlalchemy.engine": logging.WARNING,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "botocore": logging.WARNING,
    "aiobotocore": logging.WARNING,
    "aioboto3": logging.WARNING,
}


def _get_log_level() -> int:
    """Уровень логирования из LOG_LEVEL (по умолчанию INFO)."""
    level = logging.getLevelName(os.getenv("LOG_LEVEL", "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _log_to_file() -> bool:
    """LOG_TO_FILE=false отключает logs/app.log (например, в контейнере пишем только в stdout)."""
    return os.getenv("LOG_TO_FILE", "true").strip().lower() not in ("0", "false", "no")


def setup_logging() -> None:
    """Настройка логирования для приложения: консоль и, если не отключено, logs/app.log."""
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if _log_to_file():
        LOG_DIR.mkdir(exist_ok=True)
        handlers.append(logging.FileHandler(LOG_DIR / "app.log", encoding="utf-8"))

    logging.basicConfig(
        level=_get_log_level(),
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=handlers,
    )

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)
