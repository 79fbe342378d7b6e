"""
Репозиторий для работы с аккаунтами
"""

import logging

from sqlalchemy import RowMapping, delete, insert, select, update
from sqlalchemy import exc as sa_exc

from puntodeagua.core.constants import AccountStatus, UserRole
from puntodeagua.core.exceptions import DuplicateIdentityError
from puntodeagua.database.models import Account
from puntodeagua.database.schema import accounts
from puntodeagua.repositories.base import BaseRepository
from puntodeagua.utils.helpers import from_db_timestamp, get_now, to_db_timestamp


logger = logging.getLogger(__name__)

# Поля, которые можно менять частичным обновлением
UPDATABLE_FIELDS = (
    "email",
    "password_hash",
    "first_name",
    "last_name",
    "phone",
    "address",
    "role",
    "status",
)


class AccountRepository(BaseRepository[Account]):
    """Репозиторий для работы с аккаунтами"""

    entity_name = "Account"

    async def create(
        self,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str = "",
        phone: str | None = None,
        address: str | None = None,
        role: UserRole = UserRole.CUSTOMER,
    ) -> Account:
        """
        Создание аккаунта со статусом active

        Args:
            email: Email (уникальный)
            password_hash: Хэш пароля
            first_name: Имя
            last_name: Фамилия
            phone: Телефон
            address: Адрес
            role: Роль

        Returns:
            Объект Account

        Raises:
            DuplicateIdentityError: Email уже зарегистрирован
        """
        now = get_now()
        with self._storage_errors("create account"):
            try:
                async with self.transaction() as connection:
                    result = await connection.execute(
                        insert(accounts).values(
                            email=email,
                            password_hash=password_hash,
                            first_name=first_name,
                            last_name=last_name,
                            phone=phone,
                            address=address,
                            role=role.value,
                            status=AccountStatus.ACTIVE.value,
                            created_at=to_db_timestamp(now),
                            updated_at=to_db_timestamp(now),
                        )
                    )
                    account_id = result.inserted_primary_key[0]
            except sa_exc.IntegrityError as e:
                logger.info("Попытка регистрации с занятым email (account create)")
                raise DuplicateIdentityError(email) from e

        account = Account(
            id=account_id,
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
            address=address,
            role=role,
            status=AccountStatus.ACTIVE,
            created_at=now,
            updated_at=now,
        )

        logger.info("Создан аккаунт #%s (роль: %s)", account.id, role.value)
        return account

    async def get_by_id(self, account_id: int) -> Account | None:
        """
        Получение аккаунта по ID

        Args:
            account_id: ID аккаунта

        Returns:
            Объект Account или None
        """
        row = await self._fetch_one(select(accounts).where(accounts.c.id == account_id))
        return self._row_to_account(row) if row else None

    async def get_by_email(self, email: str) -> Account | None:
        """
        Получение аккаунта по email

        Args:
            email: Email

        Returns:
            Объект Account или None
        """
        row = await self._fetch_one(select(accounts).where(accounts.c.email == email))
        return self._row_to_account(row) if row else None

    async def get_all(self, role: UserRole | None = None) -> list[Account]:
        """
        Список аккаунтов (по возрастанию ID)

        Args:
            role: Фильтр по роли

        Returns:
            Список аккаунтов
        """
        query = select(accounts).order_by(accounts.c.id.asc())

        if role is not None:
            query = query.where(accounts.c.role == role.value)

        rows = await self._fetch_all(query)
        return [self._row_to_account(row) for row in rows]

    async def update(self, account_id: int, updates: dict) -> Account | None:
        """
        Частичное обновление аккаунта

        Меняются только переданные поля, updated_at обновляется всегда.

        Args:
            account_id: ID аккаунта
            updates: Словарь {поле: значение}, поля из UPDATABLE_FIELDS

        Returns:
            Обновленный Account или None если аккаунт не найден

        Raises:
            DuplicateIdentityError: Новый email уже занят
            ValueError: Передано неизвестное поле
        """
        unknown = set(updates) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Недопустимые поля для обновления: {', '.join(sorted(unknown))}")

        values = {
            field: value.value if isinstance(value, (UserRole, AccountStatus)) else value
            for field, value in updates.items()
        }
        values["updated_at"] = to_db_timestamp(get_now())

        with self._storage_errors("update account"):
            try:
                async with self.transaction() as connection:
                    result = await connection.execute(
                        update(accounts).where(accounts.c.id == account_id).values(**values)
                    )
                    if result.rowcount == 0:
                        return None
                    result = await connection.execute(
                        select(accounts).where(accounts.c.id == account_id)
                    )
                    row = result.mappings().one()
            except sa_exc.IntegrityError as e:
                raise DuplicateIdentityError(str(updates.get("email", ""))) from e

        fields = ", ".join(field for field in updates if field != "password_hash")
        logger.info("Аккаунт #%s обновлен: %s", account_id, fields or "password")
        return self._row_to_account(row)

    async def delete(self, account_id: int) -> bool:
        """
        Удаление аккаунта

        Заказы аккаунта не затрагиваются и сохраняют ссылку на его ID.

        Returns:
            True если аккаунт был удален
        """
        with self._storage_errors("delete account"):
            async with self.transaction() as connection:
                result = await connection.execute(delete(accounts).where(accounts.c.id == account_id))
                deleted = result.rowcount > 0

        if deleted:
            logger.info("Аккаунт #%s удален", account_id)
        return deleted

    def _row_to_account(self, row: RowMapping) -> Account:
        """
        Преобразование строки БД в объект Account

        Args:
            row: Строка из БД

        Returns:
            Объект Account
        """
        return Account(
            id=row["id"],
            email=row["email"],
            password_hash=row["password_hash"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            phone=row["phone"],
            address=row["address"],
            role=UserRole(row["role"]),
            status=AccountStatus(row["status"]),
            created_at=from_db_timestamp(row["created_at"]),
            updated_at=from_db_timestamp(row["updated_at"]),
        )
