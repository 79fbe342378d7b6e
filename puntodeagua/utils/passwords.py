"""
Хэширование паролей (Argon2id)

Пароль в открытом виде никогда не сохраняется и не пишется в лог.
Параметры стоимости берутся из Config и могут быть увеличены без миграции:
старые хэши продолжают проверяться, а needs_rehash() подсказывает,
когда их стоит пересчитать.
"""

import logging

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from puntodeagua.core.config import Config


logger = logging.getLogger(__name__)

# Хэши старого сервиса (bcrypt) не принимаются, нужен Argon2id
BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


class PasswordManager:
    """Обертка над argon2.PasswordHasher с параметрами из конфигурации"""

    def __init__(
        self,
        time_cost: int | None = None,
        memory_cost: int | None = None,
        parallelism: int | None = None,
    ):
        self.hasher = PasswordHasher(
            time_cost=time_cost or Config.PASSWORD_TIME_COST,
            memory_cost=memory_cost or Config.PASSWORD_MEMORY_COST,
            parallelism=parallelism or Config.PASSWORD_PARALLELISM,
        )
        # Хэш-заглушка для выравнивания времени ответа при неизвестном email
        self._dummy_hash = self.hasher.hash("puntodeagua-dummy-credential")

    def hash(self, password: str) -> str:
        """Соленый хэш пароля"""
        return self.hasher.hash(password)

    def verify(self, password_hash: str, password: str) -> bool:
        """
        Проверка пароля

        Returns:
            True если пароль совпадает с хэшем
        """
        try:
            return self.hasher.verify(password_hash, password)
        except VerifyMismatchError:
            return False
        except (InvalidHashError, VerificationError) as e:
            if password_hash.startswith(BCRYPT_PREFIXES):
                logger.warning(
                    "В БД bcrypt-хэш: вход невозможен, задайте пароль заново (hash-password)"
                )
            else:
                logger.warning("Некорректный хэш пароля в БД: %s", type(e).__name__)
            return False

    def verify_dummy(self, password: str) -> None:
        """Проверка против заглушки (результат не важен, важно затраченное время)"""
        self.verify(self._dummy_hash, password)

    def needs_rehash(self, password_hash: str) -> bool:
        """Нужно ли пересчитать хэш с текущими параметрами"""
        try:
            return self.hasher.check_needs_rehash(password_hash)
        except InvalidHashError:
            return True
