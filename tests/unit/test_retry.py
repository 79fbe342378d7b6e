"""
Тесты для retry механизма Bot API запросов
"""
from unittest.mock import AsyncMock, patch

import pytest
from aiogram.exceptions import TelegramBadRequest, TelegramNetworkError, TelegramRetryAfter
from aiogram.methods import SendMessage

from puntodeagua.core.exceptions import NotificationError
from puntodeagua.utils.retry import retry_on_telegram_error


METHOD = SendMessage(chat_id=1, text="test")


class TestRetryOnTelegramError:
    """Тесты для декоратора retry_on_telegram_error"""

    @pytest.mark.asyncio
    async def test_success_first_attempt(self):
        func = AsyncMock(return_value="ok")
        decorated = retry_on_telegram_error(max_attempts=3)(func)

        assert await decorated() == "ok"
        assert func.await_count == 1

    @pytest.mark.asyncio
    async def test_network_error_retried(self):
        func = AsyncMock(
            side_effect=[TelegramNetworkError(method=METHOD, message="timeout"), "ok"]
        )
        func.__name__ = "send"
        decorated = retry_on_telegram_error(max_attempts=3, base_delay=0.01)(func)

        with patch("puntodeagua.utils.retry.asyncio.sleep", new=AsyncMock()) as sleep:
            assert await decorated() == "ok"

        assert func.await_count == 2
        sleep.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_retry_after_waits_requested_time(self):
        func = AsyncMock(
            side_effect=[
                TelegramRetryAfter(method=METHOD, message="flood", retry_after=3),
                "ok",
            ]
        )
        func.__name__ = "send"
        decorated = retry_on_telegram_error(max_attempts=3, max_delay=10.0)(func)

        with patch("puntodeagua.utils.retry.asyncio.sleep", new=AsyncMock()) as sleep:
            assert await decorated() == "ok"

        sleep.assert_awaited_once_with(3)

    @pytest.mark.asyncio
    async def test_exhausted_attempts_raise_notification_error(self):
        func = AsyncMock(side_effect=TelegramNetworkError(method=METHOD, message="down"))
        func.__name__ = "send"
        decorated = retry_on_telegram_error(max_attempts=3, base_delay=0.01)(func)

        with patch("puntodeagua.utils.retry.asyncio.sleep", new=AsyncMock()):
            with pytest.raises(NotificationError, match="all 3 attempts failed"):
                await decorated()

        assert func.await_count == 3

    @pytest.mark.asyncio
    async def test_bad_request_not_retried(self):
        func = AsyncMock(side_effect=TelegramBadRequest(method=METHOD, message="chat not found"))
        func.__name__ = "send"
        decorated = retry_on_telegram_error(max_attempts=3)(func)

        with pytest.raises(NotificationError, match="non-retryable"):
            await decorated()

        assert func.await_count == 1
