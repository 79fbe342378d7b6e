"""
Pytest fixtures и конфигурация для тестов
"""
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio

from puntodeagua.core.exceptions import NotificationError
from puntodeagua.database import Database
from puntodeagua.services import ServiceFactory
from puntodeagua.utils.passwords import PasswordManager


class RecordingSink:
    """Канал уведомлений, который запоминает отправленные сообщения"""

    def __init__(self):
        self.messages: list[str] = []
        self.closed = False

    async def send(self, text: str) -> None:
        self.messages.append(text)

    async def close(self) -> None:
        self.closed = True


class FailingSink:
    """Канал уведомлений, который всегда падает"""

    def __init__(self):
        self.attempts = 0

    async def send(self, text: str) -> None:
        self.attempts += 1
        raise NotificationError("chat not found")

    async def close(self) -> None:
        return None


@pytest.fixture
def password_manager() -> PasswordManager:
    """
    Быстрый PasswordManager (минимальная стоимость Argon2 для тестов)
    """
    return PasswordManager(time_cost=1, memory_cost=8, parallelism=1)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest_asyncio.fixture
async def db(tmp_path) -> AsyncGenerator[Database, None]:
    """
    Фикстура для тестовой базы данных (файл во временной директории)
    """
    database = Database(str(tmp_path / "test.db"))
    await database.connect()
    await database.init_db()
    yield database
    await database.disconnect()


@pytest_asyncio.fixture
async def services(
    db: Database, password_manager: PasswordManager, sink: RecordingSink
) -> AsyncGenerator[ServiceFactory, None]:
    """
    Фабрика сервисов в строгом режиме переходов
    """
    factory = ServiceFactory(
        db.engine,
        notification_sink=sink,
        password_manager=password_manager,
        strict_transitions=True,
    )
    yield factory
    await factory.close()


@pytest_asyncio.fixture
async def permissive_services(
    db: Database, password_manager: PasswordManager, sink: RecordingSink
) -> AsyncGenerator[ServiceFactory, None]:
    """
    Фабрика сервисов в разрешающем режиме переходов
    """
    factory = ServiceFactory(
        db.engine,
        notification_sink=sink,
        password_manager=password_manager,
        strict_transitions=False,
    )
    yield factory
    await factory.close()


@pytest.fixture
def order_data() -> dict:
    """
    Данные типового заказа
    """
    return {
        "account_id": 1,
        "customer_name": "María Pérez",
        "customer_phone": "0412-1234567",
        "delivery_address": "Av. Bolívar, Edif. Sol, Apto 3-B, Valencia",
        "bottles": {"18L": 2, "12L": 0, "5L": 0},
        "payment_method": "cash",
        "total_cost": 10.00,
    }


@pytest.fixture
def registration_data() -> dict:
    return {
        "email": "Maria@Example.com",
        "password": "secreto123",
        "first_name": "María",
        "last_name": "Pérez",
        "address": "Av. Bolívar, Valencia",
        "phone": "0412-1234567",
    }


@pytest.fixture
def failing_sink() -> FailingSink:
    return FailingSink()
