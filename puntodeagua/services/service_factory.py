"""
Factory для создания сервисов и репозиториев
"""

import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from puntodeagua.core.config import Config
from puntodeagua.domain.order_state_machine import OrderStateMachine
from puntodeagua.repositories import AccountRepository, OrderRepository
from puntodeagua.services.account_service import AccountService
from puntodeagua.services.notifications import (
    NotificationDispatcher,
    NotificationSink,
    create_notification_sink,
)
from puntodeagua.services.order_service import OrderService
from puntodeagua.services.reports_service import ReportsService
from puntodeagua.utils.passwords import PasswordManager


logger = logging.getLogger(__name__)


class ServiceFactory:
    """
    Factory для создания сервисов с инжекцией зависимостей
    """

    def __init__(
        self,
        engine: AsyncEngine,
        notification_sink: NotificationSink | None = None,
        password_manager: PasswordManager | None = None,
        strict_transitions: bool | None = None,
    ):
        """
        Инициализация фабрики

        Args:
            engine: Async engine базы данных (общий пул соединений)
            notification_sink: Канал уведомлений (по умолчанию из Config)
            password_manager: Хэширование паролей (по умолчанию из Config)
            strict_transitions: Режим проверки переходов (по умолчанию из Config)
        """
        self.engine = engine
        self._notification_sink = notification_sink
        self._password_manager = password_manager
        self._strict_transitions = strict_transitions
        self._account_repo = None
        self._order_repo = None
        self._state_machine = None
        self._notification_dispatcher = None
        self._account_service = None
        self._order_service = None
        self._reports_service = None

    @property
    def account_repository(self) -> AccountRepository:
        """Ленивая инициализация AccountRepository"""
        if self._account_repo is None:
            self._account_repo = AccountRepository(self.engine)
        return self._account_repo

    @property
    def order_repository(self) -> OrderRepository:
        """Ленивая инициализация OrderRepository"""
        if self._order_repo is None:
            self._order_repo = OrderRepository(self.engine)
        return self._order_repo

    @property
    def state_machine(self) -> OrderStateMachine:
        """Ленивая инициализация OrderStateMachine"""
        if self._state_machine is None:
            strict = (
                Config.STRICT_TRANSITIONS
                if self._strict_transitions is None
                else self._strict_transitions
            )
            self._state_machine = OrderStateMachine(strict=strict)
        return self._state_machine

    @property
    def password_manager(self) -> PasswordManager:
        """Ленивая инициализация PasswordManager"""
        if self._password_manager is None:
            self._password_manager = PasswordManager()
        return self._password_manager

    @property
    def notification_dispatcher(self) -> NotificationDispatcher:
        """Ленивая инициализация NotificationDispatcher"""
        if self._notification_dispatcher is None:
            sink = self._notification_sink or create_notification_sink()
            self._notification_dispatcher = NotificationDispatcher(sink)
        return self._notification_dispatcher

    @property
    def account_service(self) -> AccountService:
        """Получение Account Service"""
        if self._account_service is None:
            self._account_service = AccountService(
                account_repo=self.account_repository,
                password_manager=self.password_manager,
            )
        return self._account_service

    @property
    def order_service(self) -> OrderService:
        """Получение Order Service"""
        if self._order_service is None:
            self._order_service = OrderService(
                order_repo=self.order_repository,
                state_machine=self.state_machine,
                notification_dispatcher=self.notification_dispatcher,
            )
        return self._order_service

    @property
    def reports_service(self) -> ReportsService:
        """Получение Reports Service"""
        if self._reports_service is None:
            self._reports_service = ReportsService(order_repo=self.order_repository)
        return self._reports_service

    async def close(self):
        """Дождаться фоновых уведомлений и закрыть канал"""
        if self._notification_dispatcher is not None:
            await self._notification_dispatcher.close()

    def reset(self):
        """Сброс кэшированных сервисов (для тестирования)"""
        self._account_repo = None
        self._order_repo = None
        self._state_machine = None
        self._notification_dispatcher = None
        self._account_service = None
        self._order_service = None
        self._reports_service = None
        logger.debug("ServiceFactory: сервисы сброшены")
