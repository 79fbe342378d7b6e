"""
Базовый репозиторий для работы с базой данных
"""

import logging
from collections.abc import Iterator
from contextlib import asynccontextmanager, contextmanager
from typing import Generic, TypeVar

from sqlalchemy import RowMapping
from sqlalchemy import exc as sa_exc
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.sql import Executable

from puntodeagua.core.exceptions import InvalidArgumentError, StorageError


logger = logging.getLogger(__name__)

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Базовый класс для всех репозиториев
    Предоставляет общую функциональность для работы с БД
    """

    entity_name = "Entity"

    def __init__(self, engine: AsyncEngine):
        """
        Инициализация репозитория

        Args:
            engine: Async engine SQLAlchemy (владеет пулом соединений)
        """
        self.engine = engine

    @contextmanager
    def _storage_errors(self, operation: str) -> Iterator[None]:
        """
        Перевод ошибок драйвера в ошибки приложения

        Подробности уходят в лог, вызывающий получает обобщенное сообщение.
        """
        try:
            yield
        except OverflowError as e:
            # Целое за пределами 64-битного INTEGER SQLite
            raise InvalidArgumentError(f"Value out of range during {operation}") from e
        except sa_exc.DBAPIError as e:
            logger.error("❌ Ошибка БД при операции '%s': %s", operation, e)
            raise StorageError(f"Storage failure during {operation}") from e

    @asynccontextmanager
    async def connection(self):
        """
        Соединение из пула

        Возвращается в пул на любом пути выхода.

        Raises:
            StorageError: Пул исчерпан дольше pool_timeout (transient)
        """
        try:
            async with self.engine.connect() as connection:
                yield connection
        except sa_exc.TimeoutError as e:
            logger.warning("Пул соединений исчерпан: %s", e)
            raise StorageError("Пул соединений исчерпан", transient=True) from e

    @asynccontextmanager
    async def transaction(self):
        """
        Контекстный менеджер для транзакций

        BEGIN IMMEDIATE сразу берет блокировку на запись, поэтому
        последовательности read-modify-write внутри блока атомарны.

        Yields:
            AsyncConnection: Подключение к БД
        """
        async with self.connection() as connection:
            await connection.execution_options(begin_mode="IMMEDIATE")
            try:
                async with connection.begin():
                    yield connection
            except Exception as e:
                logger.debug("❌ Транзакция отменена (rollback): %s", e)
                raise
            logger.debug("✅ Транзакция успешно завершена (commit)")

    async def _fetch_one(self, statement: Executable) -> RowMapping | None:
        """
        Получение одной записи

        Args:
            statement: SQL выражение

        Returns:
            Строка результата или None
        """
        with self._storage_errors(f"{self.entity_name} fetch_one"):
            async with self.connection() as connection:
                result = await connection.execute(statement)
                return result.mappings().first()

    async def _fetch_all(self, statement: Executable) -> list[RowMapping]:
        """
        Получение всех записей

        Args:
            statement: SQL выражение

        Returns:
            Список строк результата
        """
        with self._storage_errors(f"{self.entity_name} fetch_all"):
            async with self.connection() as connection:
                result = await connection.execute(statement)
                return list(result.mappings().all())
