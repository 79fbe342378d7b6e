"""
Репозиторий для работы с заказами
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import RowMapping, func, insert, select, update

from puntodeagua.core.constants import OrderStatus
from puntodeagua.core.exceptions import ConcurrentModificationError, EntityNotFoundError
from puntodeagua.database.models import Order, StatusChange
from puntodeagua.database.schema import order_status_history, orders
from puntodeagua.repositories.base import BaseRepository
from puntodeagua.utils.helpers import from_db_timestamp, get_now, to_db_timestamp


logger = logging.getLogger(__name__)

NEWEST_FIRST = (orders.c.created_at.desc(), orders.c.id.desc())


class OrderRepository(BaseRepository[Order]):
    """Репозиторий для работы с заказами"""

    entity_name = "Order"

    async def create(
        self,
        account_id: int,
        customer_name: str,
        delivery_address: str,
        payment_method: str,
        total_cost: float,
        customer_phone: str | None = None,
        bottles_18l: int = 0,
        bottles_12l: int = 0,
        bottles_5l: int = 0,
        bank: str | None = None,
        payment_reference: str | None = None,
    ) -> Order:
        """
        Создание заказа со статусом pending

        Args:
            account_id: ID аккаунта клиента
            customer_name: Имя клиента
            delivery_address: Адрес доставки
            payment_method: Способ оплаты
            total_cost: Итоговая сумма (передается клиентом, не пересчитывается)
            customer_phone: Телефон клиента
            bottles_18l: Количество бутылей 18 л
            bottles_12l: Количество бутылей 12 л
            bottles_5l: Количество бутылей 5 л
            bank: Банк (для переводов)
            payment_reference: Номер платежа

        Returns:
            Объект Order с присвоенным ID
        """
        now = get_now()
        with self._storage_errors("create order"):
            async with self.transaction() as connection:
                result = await connection.execute(
                    insert(orders).values(
                        account_id=account_id,
                        customer_name=customer_name,
                        customer_phone=customer_phone,
                        delivery_address=delivery_address,
                        bottles_18l=bottles_18l,
                        bottles_12l=bottles_12l,
                        bottles_5l=bottles_5l,
                        payment_method=payment_method,
                        bank=bank,
                        payment_reference=payment_reference,
                        total_cost=total_cost,
                        status=OrderStatus.PENDING.value,
                        version=1,
                        created_at=to_db_timestamp(now),
                        updated_at=to_db_timestamp(now),
                    )
                )
                order_id = result.inserted_primary_key[0]
                await connection.execute(
                    insert(order_status_history).values(
                        order_id=order_id,
                        old_status=None,
                        new_status=OrderStatus.PENDING.value,
                        changed_by=account_id,
                        changed_at=to_db_timestamp(now),
                    )
                )

        order = Order(
            id=order_id,
            account_id=account_id,
            customer_name=customer_name,
            customer_phone=customer_phone,
            delivery_address=delivery_address,
            bottles_18l=bottles_18l,
            bottles_12l=bottles_12l,
            bottles_5l=bottles_5l,
            payment_method=payment_method,
            bank=bank,
            payment_reference=payment_reference,
            total_cost=total_cost,
            status=OrderStatus.PENDING,
            version=1,
            created_at=now,
            updated_at=now,
        )

        logger.info("Создан заказ #%s для аккаунта #%s", order.id, account_id)
        return order

    async def get_by_id(self, order_id: int) -> Order | None:
        """
        Получение заказа по ID

        Args:
            order_id: ID заказа

        Returns:
            Объект Order или None
        """
        row = await self._fetch_one(select(orders).where(orders.c.id == order_id))
        return self._row_to_order(row) if row else None

    async def get_by_account(self, account_id: int) -> list[Order]:
        """
        История заказов аккаунта (сначала новые)

        Args:
            account_id: ID аккаунта

        Returns:
            Список заказов
        """
        rows = await self._fetch_all(
            select(orders).where(orders.c.account_id == account_id).order_by(*NEWEST_FIRST)
        )
        return [self._row_to_order(row) for row in rows]

    async def get_by_statuses(self, statuses: Iterable[OrderStatus]) -> list[Order]:
        """
        Заказы в любом из указанных статусов (сначала новые)

        Args:
            statuses: Набор статусов

        Returns:
            Список заказов
        """
        values = sorted({OrderStatus(s).value for s in statuses})
        if not values:
            return []

        rows = await self._fetch_all(
            select(orders).where(orders.c.status.in_(values)).order_by(*NEWEST_FIRST)
        )
        return [self._row_to_order(row) for row in rows]

    async def get_filtered(
        self,
        status: OrderStatus | None = None,
        created_from: datetime | None = None,
        created_before: datetime | None = None,
    ) -> list[Order]:
        """
        Заказы с фильтрацией по статусу и дате создания (сначала новые)

        Args:
            status: Фильтр по статусу
            created_from: Нижняя граница created_at (включительно)
            created_before: Верхняя граница created_at (не включительно)

        Returns:
            Список заказов
        """
        query = select(orders).order_by(*NEWEST_FIRST)

        if status is not None:
            query = query.where(orders.c.status == status.value)

        if created_from is not None:
            query = query.where(orders.c.created_at >= to_db_timestamp(created_from))

        if created_before is not None:
            query = query.where(orders.c.created_at < to_db_timestamp(created_before))

        rows = await self._fetch_all(query)
        return [self._row_to_order(row) for row in rows]

    async def update_status(
        self,
        order_id: int,
        expected_status: OrderStatus,
        expected_version: int,
        new_status: OrderStatus,
        changed_by: int | None = None,
        notes: str | None = None,
    ) -> Order:
        """
        Атомарное обновление статуса (compare-and-set)

        Строка обновляется только если статус и версия не изменились с момента
        чтения. Версия увеличивается при каждом переходе, в т.ч. в тот же статус.

        Args:
            order_id: ID заказа
            expected_status: Статус, для которого проверялся переход
            expected_version: Версия заказа на момент чтения
            new_status: Новый статус
            changed_by: ID аккаунта, изменившего статус
            notes: Заметки

        Returns:
            Обновленный заказ

        Raises:
            EntityNotFoundError: Заказ не найден
            ConcurrentModificationError: Заказ изменен другим запросом
        """
        now = to_db_timestamp(get_now())

        with self._storage_errors("update order status"):
            async with self.transaction() as connection:
                result = await connection.execute(
                    update(orders)
                    .where(
                        orders.c.id == order_id,
                        orders.c.status == expected_status.value,
                        orders.c.version == expected_version,
                    )
                    .values(status=new_status.value, updated_at=now, version=orders.c.version + 1)
                )

                if result.rowcount == 0:
                    result = await connection.execute(
                        select(orders.c.id).where(orders.c.id == order_id)
                    )
                    if result.first() is None:
                        raise EntityNotFoundError("Order", order_id)
                    raise ConcurrentModificationError("Order", order_id, expected_version)

                await connection.execute(
                    insert(order_status_history).values(
                        order_id=order_id,
                        old_status=expected_status.value,
                        new_status=new_status.value,
                        changed_by=changed_by,
                        changed_at=now,
                        notes=notes,
                    )
                )

                result = await connection.execute(select(orders).where(orders.c.id == order_id))
                row = result.mappings().one()

        logger.info(
            "Статус заказа #%s изменен: %s → %s", order_id, expected_status.value, new_status.value
        )
        return self._row_to_order(row)

    async def get_status_history(self, order_id: int) -> list[StatusChange]:
        """
        Получение истории изменения статусов заказа (в хронологическом порядке)

        Args:
            order_id: ID заказа

        Returns:
            Список записей истории
        """
        rows = await self._fetch_all(
            select(order_status_history)
            .where(order_status_history.c.order_id == order_id)
            .order_by(order_status_history.c.changed_at.asc(), order_status_history.c.id.asc())
        )

        return [
            StatusChange(
                order_id=row["order_id"],
                old_status=OrderStatus(row["old_status"]) if row["old_status"] else None,
                new_status=OrderStatus(row["new_status"]),
                changed_by=row["changed_by"],
                changed_at=from_db_timestamp(row["changed_at"]),
                notes=row["notes"],
            )
            for row in rows
        ]

    async def get_sales_totals(
        self, statuses: Iterable[OrderStatus], since: datetime | None = None
    ) -> RowMapping:
        """
        Суммы по заказам в указанных статусах

        Args:
            statuses: Учитываемые статусы
            since: Нижняя граница created_at (None - за все время)

        Returns:
            Строка с колонками total_revenue, total_18l, total_12l, total_5l
        """
        values = sorted({OrderStatus(s).value for s in statuses})

        query = select(
            func.coalesce(func.sum(orders.c.total_cost), 0).label("total_revenue"),
            func.coalesce(func.sum(orders.c.bottles_18l), 0).label("total_18l"),
            func.coalesce(func.sum(orders.c.bottles_12l), 0).label("total_12l"),
            func.coalesce(func.sum(orders.c.bottles_5l), 0).label("total_5l"),
        ).where(orders.c.status.in_(values))

        if since is not None:
            query = query.where(orders.c.created_at >= to_db_timestamp(since))

        return await self._fetch_one(query)

    def _row_to_order(self, row: RowMapping) -> Order:
        """
        Преобразование строки БД в объект Order

        Args:
            row: Строка из БД

        Returns:
            Объект Order
        """
        return Order(
            id=row["id"],
            account_id=row["account_id"],
            customer_name=row["customer_name"],
            customer_phone=row["customer_phone"],
            delivery_address=row["delivery_address"],
            bottles_18l=row["bottles_18l"],
            bottles_12l=row["bottles_12l"],
            bottles_5l=row["bottles_5l"],
            payment_method=row["payment_method"],
            bank=row["bank"],
            payment_reference=row["payment_reference"],
            total_cost=round(float(row["total_cost"]), 2),
            status=OrderStatus(row["status"]),
            version=row["version"],
            created_at=from_db_timestamp(row["created_at"]),
            updated_at=from_db_timestamp(row["updated_at"]),
        )
