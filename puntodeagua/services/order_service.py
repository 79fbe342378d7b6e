"""
Сервис для работы с заказами (бизнес-логика)
"""

import logging
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from typing import Any

from puntodeagua.core.constants import MAX_ENTITY_ID, OrderStatus, UserRole
from puntodeagua.core.exceptions import (
    ConcurrentModificationError,
    EntityNotFoundError,
    InvalidArgumentError,
)
from puntodeagua.database.models import Order, StatusChange
from puntodeagua.domain.order_state_machine import OrderStateMachine
from puntodeagua.presenters import OrderPresenter
from puntodeagua.repositories import OrderRepository
from puntodeagua.schemas import OrderCreateSchema, validate_payload
from puntodeagua.services.notifications import NotificationDispatcher
from puntodeagua.utils.helpers import parse_date, start_of_day


logger = logging.getLogger(__name__)


def parse_account_id(value: Any) -> int:
    """
    Разбор ID аккаунта из внешнего ввода

    Raises:
        InvalidArgumentError: ID отсутствует, не число, не положительный
            или не помещается в INTEGER SQLite
    """
    if value is None or isinstance(value, bool):
        raise InvalidArgumentError("ID аккаунта не указан")

    text = str(value).strip()
    if text.lower() in ("", "undefined", "null", "none"):
        raise InvalidArgumentError("ID аккаунта не указан")

    try:
        account_id = int(text)
    except ValueError:
        raise InvalidArgumentError(f"Некорректный ID аккаунта: {value!r}") from None

    if not 0 < account_id <= MAX_ENTITY_ID:
        raise InvalidArgumentError(f"Некорректный ID аккаунта: {value!r}")
    return account_id


def check_order_id(order_id: Any) -> int:
    """
    Проверка ID заказа перед обращением к БД

    Raises:
        InvalidArgumentError: ID не целое число или вне диапазона INTEGER SQLite
    """
    if isinstance(order_id, bool) or not isinstance(order_id, int):
        raise InvalidArgumentError(f"Некорректный ID заказа: {order_id!r}")
    if abs(order_id) > MAX_ENTITY_ID:
        raise InvalidArgumentError(f"ID заказа вне допустимого диапазона: {order_id}")
    return order_id


class OrderService:
    """
    Сервис для управления заказами
    Инкапсулирует бизнес-логику работы с заказами
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        state_machine: OrderStateMachine,
        notification_dispatcher: NotificationDispatcher | None = None,
    ):
        """
        Инициализация сервиса

        Args:
            order_repo: Репозиторий заказов
            state_machine: Проверка переходов статусов
            notification_dispatcher: Фоновая отправка уведомлений о новых заказах
        """
        self.order_repo = order_repo
        self.state_machine = state_machine
        self.notification_dispatcher = notification_dispatcher

    async def place(self, data: dict[str, Any] | OrderCreateSchema) -> Order:
        """
        Оформление заказа

        Данные проверяются до записи. Уведомление уходит в фоне: его
        ошибка не влияет на результат.

        Args:
            data: Данные заказа (см. OrderCreateSchema)

        Returns:
            Сохраненный заказ со статусом pending

        Raises:
            ValidationError: Не заполнены обязательные поля
            StorageError: Ошибка хранилища
        """
        schema = validate_payload(OrderCreateSchema, data)

        order = await self.order_repo.create(
            account_id=schema.account_id,
            customer_name=schema.customer_name,
            customer_phone=schema.customer_phone,
            delivery_address=schema.delivery_address,
            bottles_18l=schema.bottles_18l,
            bottles_12l=schema.bottles_12l,
            bottles_5l=schema.bottles_5l,
            payment_method=schema.payment_method,
            bank=schema.bank,
            payment_reference=schema.payment_reference,
            total_cost=schema.total_cost,
        )

        self._notify_new_order(order)
        return order

    def _notify_new_order(self, order: Order) -> None:
        if self.notification_dispatcher is None:
            return
        try:
            message = OrderPresenter.format_new_order_notification(order)
            self.notification_dispatcher.dispatch(message)
        except Exception as e:
            # Заказ уже сохранен; уведомление best-effort
            logger.exception("Не удалось поставить уведомление о заказе #%s: %s", order.id, e)

    async def get_order(self, order_id: int) -> Order:
        """
        Получение заказа по ID

        Raises:
            InvalidArgumentError: Некорректный ID
            EntityNotFoundError: Заказ не найден
        """
        check_order_id(order_id)
        order = await self.order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError("Order", order_id)
        return order

    async def get_history_for_account(self, account_id: Any) -> list[Order]:
        """
        История заказов клиента (сначала новые)

        Args:
            account_id: ID аккаунта (из внешнего ввода, может быть строкой)

        Raises:
            InvalidArgumentError: ID отсутствует или некорректен
        """
        return await self.order_repo.get_by_account(parse_account_id(account_id))

    async def list_by_status(self, status: str | OrderStatus) -> list[Order]:
        """
        Заказы в статусе (сначала новые)

        Raises:
            InvalidArgumentError: Некорректный ID заказа
            InvalidStatusError: Статус вне закрытого набора
        """
        return await self.order_repo.get_by_statuses([self.state_machine.parse_status(status)])

    async def list_by_statuses(self, statuses: Iterable[str | OrderStatus]) -> list[Order]:
        """
        Заказы в любом из статусов (сначала новые)

        Raises:
            InvalidStatusError: Один из статусов вне закрытого набора
        """
        parsed = [self.state_machine.parse_status(status) for status in statuses]
        return await self.order_repo.get_by_statuses(parsed)

    async def pending_queue(self) -> list[Order]:
        """Новые заказы, ожидающие распределителя"""
        return await self.order_repo.get_by_statuses([OrderStatus.PENDING])

    async def in_flight_queue(self) -> list[Order]:
        """Заказы в работе (accepted, in_process, in_transit)"""
        return await self.order_repo.get_by_statuses(OrderStatus.in_flight())

    async def completed_queue(self) -> list[Order]:
        """Доставленные заказы"""
        return await self.order_repo.get_by_statuses([OrderStatus.DELIVERED])

    async def list_filtered(
        self,
        status: str | OrderStatus | None = None,
        date_from: date | datetime | str | None = None,
        date_to: date | datetime | str | None = None,
    ) -> list[Order]:
        """
        Заказы для администратора с фильтрами

        Args:
            status: Статус (без учета регистра)
            date_from: Дата начала (включительно)
            date_to: Дата окончания (включительно весь день)

        Returns:
            Список заказов (сначала новые)

        Raises:
            InvalidArgumentError: Неверный статус или дата
        """
        status_filter = None
        if status is not None and status != "":
            status_filter = self.state_machine.parse_status(status)

        created_from = None
        created_before = None
        try:
            if date_from:
                created_from = start_of_day(parse_date(date_from))
            if date_to:
                created_before = start_of_day(parse_date(date_to) + timedelta(days=1))
        except ValueError as e:
            raise InvalidArgumentError(f"Некорректная дата: {e}") from None

        return await self.order_repo.get_filtered(
            status=status_filter,
            created_from=created_from,
            created_before=created_before,
        )

    async def change_status(
        self,
        order_id: int,
        new_status: str | OrderStatus,
        changed_by: int | None = None,
        actor_role: UserRole | None = None,
        expected_version: int | None = None,
        notes: str | None = None,
    ) -> Order:
        """
        Изменение статуса заказа с валидацией через State Machine

        Переход в текущий статус допустим и тоже записывается: обновляются
        updated_at и version, в историю добавляется строка. Такая запись
        отличается от предыдущей не только временем, но и версией.

        Args:
            order_id: ID заказа
            new_status: Новый статус (строка с внешнего ввода или OrderStatus)
            changed_by: ID аккаунта, меняющего статус
            actor_role: Роль для проверки прав (None - без проверки)
            expected_version: Версия, которую видел клиент (None - текущая)
            notes: Заметки к переходу

        Returns:
            Обновленный заказ

        Raises:
            InvalidStatusError: Статус вне закрытого набора
            EntityNotFoundError: Заказ не найден
            InvalidStateTransitionError: Переход недопустим или нет прав
            ConcurrentModificationError: Заказ изменен другим запросом
        """
        check_order_id(order_id)
        target = self.state_machine.parse_status(new_status)

        order = await self.order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError("Order", order_id)

        if expected_version is not None and expected_version != order.version:
            raise ConcurrentModificationError("Order", order_id, expected_version)

        result = self.state_machine.validate_transition(order.status, target, actor_role=actor_role)
        for warning in result.warnings or []:
            logger.warning("Заказ #%s (%s → %s): %s", order_id, order.status.value, target.value, warning)

        return await self.order_repo.update_status(
            order_id=order_id,
            expected_status=order.status,
            expected_version=order.version,
            new_status=target,
            changed_by=changed_by,
            notes=notes,
        )

    async def get_status_history(self, order_id: int) -> list[StatusChange]:
        """
        История переходов статуса заказа

        Raises:
            EntityNotFoundError: Заказ не найден
        """
        await self.get_order(order_id)
        return await self.order_repo.get_status_history(order_id)
