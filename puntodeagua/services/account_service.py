"""
Сервис для работы с аккаунтами (бизнес-логика)
"""

import asyncio
import logging
from typing import Any

from puntodeagua.core.constants import AccountStatus, UserRole
from puntodeagua.core.exceptions import (
    AccountSuspendedError,
    EntityNotFoundError,
    InvalidArgumentError,
    InvalidCredentialsError,
    ValidationError,
)
from puntodeagua.database.models import Account
from puntodeagua.repositories import AccountRepository
from puntodeagua.schemas import (
    AccountCreateSchema,
    AccountRegisterSchema,
    AccountUpdateSchema,
    validate_payload,
)
from puntodeagua.utils.passwords import PasswordManager


logger = logging.getLogger(__name__)


class AccountService:
    """
    Сервис для управления аккаунтами
    Инкапсулирует регистрацию, аутентификацию и администрирование аккаунтов
    """

    def __init__(self, account_repo: AccountRepository, password_manager: PasswordManager):
        """
        Инициализация сервиса

        Args:
            account_repo: Репозиторий аккаунтов
            password_manager: Хэширование и проверка паролей
        """
        self.account_repo = account_repo
        self.password_manager = password_manager

    async def _hash_password(self, password: str) -> str:
        # Хэширование выполняется в потоке, event loop не блокируется
        return await asyncio.to_thread(self.password_manager.hash, password)

    async def _create(self, schema: AccountCreateSchema) -> Account:
        password_hash = await self._hash_password(schema.password)
        return await self.account_repo.create(
            email=schema.email,
            password_hash=password_hash,
            first_name=schema.first_name,
            last_name=schema.last_name,
            phone=schema.phone,
            address=schema.address,
            role=schema.role,
        )

    async def register(self, data: dict[str, Any] | AccountRegisterSchema) -> Account:
        """
        Самостоятельная регистрация клиента

        Args:
            data: email, password, first_name, last_name, address, phone (опционально)

        Returns:
            Аккаунт со статусом active и ролью customer

        Raises:
            ValidationError: Не заполнены обязательные поля
            DuplicateIdentityError: Email уже зарегистрирован
        """
        schema = validate_payload(AccountRegisterSchema, data)
        account = await self._create(schema)
        logger.info("Зарегистрирован клиент #%s", account.id)
        return account

    async def create_account(self, data: dict[str, Any] | AccountCreateSchema) -> Account:
        """
        Создание аккаунта администратором (с явной ролью)

        Raises:
            ValidationError: Не заполнены обязательные поля или неверная роль
            DuplicateIdentityError: Email уже зарегистрирован
        """
        schema = validate_payload(AccountCreateSchema, data)
        account = await self._create(schema)
        logger.info("Администратор создал аккаунт #%s с ролью %s", account.id, account.role.value)
        return account

    async def authenticate(self, email: str, password: str) -> Account:
        """
        Проверка email и пароля

        Неизвестный email и неверный пароль дают одинаковую ошибку. Пароль
        проверяется в любом случае (для неизвестного email - против
        хэша-заглушки), чтобы время ответа не выдавало ветку.

        Args:
            email: Email
            password: Пароль

        Returns:
            Объект Account

        Raises:
            InvalidCredentialsError: Неизвестный email или неверный пароль
            AccountSuspendedError: Аккаунт заблокирован
        """
        if not email or not password:
            raise ValidationError("Email и пароль обязательны")

        account = await self.account_repo.get_by_email(email.strip().lower())
        if account is None:
            await asyncio.to_thread(self.password_manager.verify_dummy, password)
            logger.info("Неудачная попытка входа: неизвестный email")
            raise InvalidCredentialsError()

        password_ok = await asyncio.to_thread(
            self.password_manager.verify, account.password_hash, password
        )

        if account.is_suspended:
            logger.info("Попытка входа в заблокированный аккаунт #%s", account.id)
            raise AccountSuspendedError()

        if not password_ok:
            logger.info("Неудачная попытка входа в аккаунт #%s", account.id)
            raise InvalidCredentialsError()

        if self.password_manager.needs_rehash(account.password_hash):
            new_hash = await self._hash_password(password)
            account = await self.account_repo.update(account.id, {"password_hash": new_hash}) or account
            logger.info("Хэш пароля аккаунта #%s пересчитан с новыми параметрами", account.id)

        logger.info("Успешный вход: аккаунт #%s (%s)", account.id, account.role.value)
        return account

    async def get_by_id(self, account_id: int) -> Account:
        """
        Получение аккаунта по ID

        Raises:
            EntityNotFoundError: Аккаунт не найден
        """
        account = await self.account_repo.get_by_id(account_id)
        if account is None:
            raise EntityNotFoundError("Account", account_id)
        return account

    async def update(self, account_id: int, data: dict[str, Any] | AccountUpdateSchema) -> Account:
        """
        Частичное обновление профиля

        Меняются только переданные поля, updated_at обновляется всегда.

        Args:
            account_id: ID аккаунта
            data: Поля для обновления (email, password, first_name, last_name,
                phone, address, role, status)

        Returns:
            Обновленный аккаунт

        Raises:
            ValidationError: Нечего обновлять или поле некорректно
            EntityNotFoundError: Аккаунт не найден
            DuplicateIdentityError: Новый email уже занят
        """
        schema = validate_payload(AccountUpdateSchema, data)
        updates = schema.get_updates()
        if not updates:
            raise ValidationError("Нет полей для обновления")

        if "password" in updates:
            updates["password_hash"] = await self._hash_password(updates.pop("password"))

        account = await self.account_repo.update(account_id, updates)
        if account is None:
            raise EntityNotFoundError("Account", account_id)

        return account

    async def set_role(self, account_id: int, role: str | UserRole) -> Account:
        """
        Смена роли

        Raises:
            InvalidArgumentError: Роль вне закрытого набора
            EntityNotFoundError: Аккаунт не найден
        """
        try:
            new_role = UserRole.parse(role)
        except ValueError as e:
            raise InvalidArgumentError(str(e)) from None

        account = await self.account_repo.update(account_id, {"role": new_role})
        if account is None:
            raise EntityNotFoundError("Account", account_id)

        logger.info("Роль аккаунта #%s изменена на %s", account_id, new_role.value)
        return account

    async def set_status(self, account_id: int, status: str | AccountStatus) -> Account:
        """
        Блокировка или разблокировка аккаунта

        Raises:
            InvalidArgumentError: Статус не active/suspended
            EntityNotFoundError: Аккаунт не найден
        """
        try:
            new_status = AccountStatus.parse(status)
        except ValueError as e:
            raise InvalidArgumentError(str(e)) from None

        account = await self.account_repo.update(account_id, {"status": new_status})
        if account is None:
            raise EntityNotFoundError("Account", account_id)

        logger.info("Статус аккаунта #%s изменен на %s", account_id, new_status.value)
        return account

    async def delete(self, account_id: int) -> None:
        """
        Удаление аккаунта (заказы аккаунта сохраняются)

        Raises:
            EntityNotFoundError: Аккаунт не найден
        """
        if not await self.account_repo.delete(account_id):
            raise EntityNotFoundError("Account", account_id)
        logger.info("Аккаунт #%s удален", account_id)

    async def list_accounts(self, role: str | UserRole | None = None) -> list[Account]:
        """
        Список аккаунтов по возрастанию ID

        Args:
            role: Фильтр по роли (None - все)

        Raises:
            InvalidArgumentError: Роль вне закрытого набора
        """
        role_filter = None
        if role is not None and role != "":
            try:
                role_filter = UserRole.parse(role)
            except ValueError as e:
                raise InvalidArgumentError(str(e)) from None

        return await self.account_repo.get_all(role=role_filter)
