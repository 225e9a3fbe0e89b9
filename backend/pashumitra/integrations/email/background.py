"""
Fire-and-forget отправка писем из обработчиков запросов.

Письмо уходит после ответа клиенту (FastAPI BackgroundTasks); результат
и любые ошибки попадают только в лог, вызывающий код их не видит.
"""
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import BackgroundTasks

from pashumitra.integrations.email.types import DeliveryResult

logger = logging.getLogger(__name__)


async def deliver_and_log(
    send: Callable[..., Awaitable[DeliveryResult]],
    *args: Any,
    description: str,
) -> None:
    """Выполнить отправку и записать итог в лог. Ничего не возвращает и не бросает."""
    try:
        result = await send(*args)
    except Exception:
        logger.exception("Failed to send %s", description)
        return
    if result.success:
        logger.info(
            "Sent %s via %s (message_id=%s)",
            description,
            result.service_used,
            result.provider_message_id,
        )
    else:
        logger.warning(
            "Failed to send %s via %s: %s",
            description,
            result.service_used,
            result.error_detail,
        )


def deliver_in_background(
    background_tasks: BackgroundTasks,
    send: Callable[..., Awaitable[DeliveryResult]],
    *args: Any,
    description: str,
) -> None:
    """Поставить отправку письма в фоновые задачи запроса (без ожидания результата)."""
    background_tasks.add_task(deliver_and_log, send, *args, description=description)
