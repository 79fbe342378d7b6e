"""
Retry механизм для Bot API запросов с экспоненциальным backoff

Это собственная политика повторов канала уведомлений. Ядро (заказы, аккаунты)
никогда не повторяет запросы: после исчерпания попыток ошибка превращается
в NotificationError и только логируется.
"""
import asyncio
import logging
from functools import wraps
from typing import Any, Callable, TypeVar

from aiogram.exceptions import (
    TelegramAPIError,
    TelegramBadRequest,
    TelegramConflictError,
    TelegramEntityTooLarge,
    TelegramForbiddenError,
    TelegramNetworkError,
    TelegramNotFound,
    TelegramRetryAfter,
    TelegramServerError,
    TelegramUnauthorizedError,
)

from puntodeagua.core.exceptions import NotificationError


logger = logging.getLogger(__name__)

T = TypeVar("T")

# Исключения, которые нельзя повторять (ошибки валидации/прав)
NON_RETRYABLE_EXCEPTIONS = (
    TelegramBadRequest,  # Некорректный запрос (не исправится повтором)
    TelegramNotFound,  # Чат не найден
    TelegramUnauthorizedError,  # Неверный токен бота
    TelegramConflictError,
    TelegramForbiddenError,  # Бот удален из чата
    TelegramEntityTooLarge,
)

# Исключения, которые можно повторять
RETRYABLE_EXCEPTIONS = (
    TelegramNetworkError,  # Сетевые ошибки
    TelegramServerError,  # Ошибки сервера Telegram (5xx)
)


def retry_on_telegram_error(
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 10.0,
    exponential_base: float = 2.0,
    exceptions: tuple = RETRYABLE_EXCEPTIONS,
) -> Callable:
    """
    Декоратор для повтора Bot API запросов с экспоненциальным backoff

    Args:
        max_attempts: Максимальное количество попыток
        base_delay: Базовая задержка между попытками (секунды)
        max_delay: Максимальная задержка между попытками (секунды)
        exponential_base: База для экспоненциального роста задержки
        exceptions: Кортеж исключений для повтора

    Raises:
        NotificationError: Если все попытки исчерпаны или ошибка неповторяемая

    Example:
        @retry_on_telegram_error(max_attempts=5)
        async def send_notification(bot, chat_id, text):
            return await bot.send_message(chat_id, text)
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            last_exception: Exception | None = None

            for attempt in range(1, max_attempts + 1):
                try:
                    return await func(*args, **kwargs)

                except TelegramRetryAfter as e:
                    # 429 Too Many Requests: Telegram указывает точное время ожидания
                    wait_time = min(e.retry_after, max_delay)
                    logger.warning(
                        "%s: Flood control exceeded (429). Retry after %s seconds. Attempt %d/%d",
                        func.__name__,
                        e.retry_after,
                        attempt,
                        max_attempts,
                    )
                    last_exception = e
                    if attempt < max_attempts:
                        await asyncio.sleep(wait_time)

                except exceptions as e:
                    delay = min(base_delay * (exponential_base ** (attempt - 1)), max_delay)
                    logger.warning(
                        "%s: %s occurred. Attempt %d/%d. Error: %s",
                        func.__name__,
                        type(e).__name__,
                        attempt,
                        max_attempts,
                        str(e),
                    )
                    last_exception = e
                    if attempt < max_attempts:
                        await asyncio.sleep(delay)

                except NON_RETRYABLE_EXCEPTIONS as e:
                    raise NotificationError(
                        f"{func.__name__}: non-retryable {type(e).__name__}: {e}"
                    ) from e

                except TelegramAPIError as e:
                    raise NotificationError(
                        f"{func.__name__}: unexpected Telegram API error {type(e).__name__}: {e}"
                    ) from e

            raise NotificationError(
                f"{func.__name__}: all {max_attempts} attempts failed. Last error: {last_exception}"
            ) from last_exception

        return wrapper

    return decorator
