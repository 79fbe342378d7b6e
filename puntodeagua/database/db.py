"""
Работа с базой данных
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import exc as sa_exc
from sqlalchemy.ext.asyncio import AsyncEngine

from puntodeagua.core.config import Config
from puntodeagua.core.exceptions import StorageError
from puntodeagua.database.engine import MEMORY_PATH, create_engine
from puntodeagua.database.schema import metadata


if TYPE_CHECKING:
    from puntodeagua.services.notifications import NotificationSink
    from puntodeagua.services.service_factory import ServiceFactory


logger = logging.getLogger(__name__)


class Database:
    """Класс для работы с базой данных"""

    def __init__(
        self,
        db_path: str | None = None,
        notification_sink: "NotificationSink | None" = None,
    ):
        """
        Инициализация

        Args:
            db_path: Путь к файлу базы данных (":memory:" для тестов)
            notification_sink: Канал уведомлений о новых заказах
        """
        self.db_path = db_path or Config.DATABASE_PATH
        self.notification_sink = notification_sink
        self.engine: AsyncEngine | None = None
        self._service_factory: "ServiceFactory | None" = None

    async def connect(self):
        """
        Создание engine и проверочное соединение

        Первое соединение переводит файл в режим WAL до того, как появятся
        конкурирующие соединения.

        Raises:
            StorageError: База данных недоступна
        """
        if self.db_path != MEMORY_PATH:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        self.engine = create_engine(
            self.db_path,
            pool_size=Config.POOL_MAX_SIZE,
            connect_timeout=Config.POOL_CONNECT_TIMEOUT,
            recycle=Config.POOL_IDLE_TIMEOUT,
        )
        try:
            async with self.engine.connect():
                pass
        except sa_exc.DBAPIError as e:
            logger.error("Не удалось подключиться к БД %s: %s", self.db_path, e)
            await self.engine.dispose()
            self.engine = None
            raise StorageError("База данных недоступна", transient=True) from e

        logger.info("Подключено к базе данных: %s", self.db_path)

    async def disconnect(self):
        """Отключение от базы данных (дожидается отправки уведомлений и закрывает канал)"""
        if self._service_factory is not None:
            await self._service_factory.close()
            self._service_factory = None
        if self.engine is not None:
            await self.engine.dispose()
            self.engine = None
            logger.info("Отключено от базы данных")

    @property
    def services(self) -> "ServiceFactory":
        """
        Получение Service Factory для доступа к сервисам

        Returns:
            ServiceFactory: Фабрика сервисов

        Raises:
            RuntimeError: База данных не подключена
        """
        if self.engine is None:
            raise RuntimeError("База данных не подключена")

        if self._service_factory is None:
            from puntodeagua.services.service_factory import ServiceFactory

            self._service_factory = ServiceFactory(
                self.engine, notification_sink=self.notification_sink
            )
        return self._service_factory

    async def init_db(self):
        """
        Инициализация схемы базы данных

        Идемпотентна: таблицы и индексы создаются только если их нет.
        """
        if self.engine is None:
            raise RuntimeError("База данных не подключена")

        try:
            async with self.engine.begin() as connection:
                await connection.run_sync(metadata.create_all)
        except sa_exc.DBAPIError as e:
            logger.error("Ошибка инициализации схемы БД: %s", e)
            raise StorageError("No se pudo inicializar la base de datos") from e

        logger.info("[OK] База данных инициализирована")
