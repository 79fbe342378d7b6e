"""
Уведомления о новых заказах (fire-and-forget)

Отправка никогда не блокирует и не отменяет оформление заказа: сообщение
уходит в фоновую задачу, ошибки доставки только логируются.
"""

import asyncio
import logging
from typing import Protocol

from aiogram import Bot

from puntodeagua.core.config import Config
from puntodeagua.core.exceptions import NotificationError
from puntodeagua.utils.retry import retry_on_telegram_error


logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    """Канал доставки уведомлений"""

    async def send(self, text: str) -> None: ...

    async def close(self) -> None: ...


class LoggingNotificationSink:
    """Канал-заглушка: Telegram не настроен, сообщение только пишется в лог"""

    async def send(self, text: str) -> None:
        logger.info("Уведомление не отправлено (Telegram не настроен):\n%s", text)

    async def close(self) -> None:
        return None


class TelegramNotificationSink:
    """Отправка сообщений в чат распределителей через Bot API"""

    def __init__(self, token: str, chat_id: str | int, bot: Bot | None = None):
        """
        Args:
            token: Токен бота
            chat_id: ID чата распределителей
            bot: Готовый экземпляр Bot (для тестов)
        """
        self.chat_id = chat_id
        self.bot = bot or Bot(token=token)

    @retry_on_telegram_error(max_attempts=3, base_delay=1.0)
    async def send(self, text: str) -> None:
        await self.bot.send_message(
            chat_id=self.chat_id,
            text=text,
            parse_mode="HTML",
            disable_web_page_preview=True,
        )
        logger.debug("Уведомление отправлено в чат %s", self.chat_id)

    async def close(self) -> None:
        await self.bot.session.close()


def create_notification_sink() -> NotificationSink:
    """Канал уведомлений по настройкам из Config"""
    if Config.notifications_enabled():
        return TelegramNotificationSink(Config.TELEGRAM_BOT_TOKEN, Config.TELEGRAM_CHAT_ID)

    logger.warning(
        "TELEGRAM_BOT_TOKEN или TELEGRAM_CHAT_ID не заданы. "
        "Уведомления о заказах отправляться не будут."
    )
    return LoggingNotificationSink()


class NotificationDispatcher:
    """
    Фоновая доставка уведомлений

    Каждое уведомление - отдельная asyncio задача с таймаутом. Ссылки на
    задачи хранятся до завершения, drain() дожидается всех при остановке.
    """

    def __init__(self, sink: NotificationSink, timeout: float | None = None):
        """
        Args:
            sink: Канал доставки
            timeout: Максимальное время доставки одного сообщения (секунды)
        """
        self.sink = sink
        self.timeout = timeout if timeout is not None else Config.NOTIFICATION_TIMEOUT
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Количество недоставленных уведомлений"""
        return len(self._tasks)

    def dispatch(self, text: str) -> asyncio.Task:
        """
        Запуск доставки в фоне

        Args:
            text: Текст сообщения

        Returns:
            Задача доставки (ждать ее не обязательно)
        """
        task = asyncio.get_running_loop().create_task(self._deliver(text))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _deliver(self, text: str) -> bool:
        try:
            await asyncio.wait_for(self.sink.send(text), timeout=self.timeout)
            return True
        except asyncio.TimeoutError:
            logger.error("Уведомление не доставлено: таймаут %.1f с", self.timeout)
        except NotificationError as e:
            logger.error("Уведомление не доставлено: %s", e)
        except Exception as e:
            # Граница фоновой задачи: ошибка канала не должна дойти до заказа
            logger.exception("Неожиданная ошибка при отправке уведомления: %s", e)
        return False

    async def drain(self) -> None:
        """Дождаться доставки всех запущенных уведомлений"""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        """Дождаться уведомлений и закрыть канал"""
        await self.drain()
        await self.sink.close()
