"""
Конфигурация приложения из переменных окружения (.env)
"""

import os

from dotenv import load_dotenv


load_dotenv()


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return float(raw)


class Config:
    """Настройки приложения"""

    # База данных
    DATABASE_PATH: str = os.getenv("DATABASE_PATH", "data/puntodeagua.db")

    # Пул соединений SQLAlchemy: размер, таймаут получения соединения,
    # возраст (секунды), после которого соединение пересоздается
    POOL_MAX_SIZE: int = _get_int("POOL_MAX_SIZE", 20)
    POOL_CONNECT_TIMEOUT: float = _get_float("POOL_CONNECT_TIMEOUT", 10.0)
    POOL_IDLE_TIMEOUT: float = _get_float("POOL_IDLE_TIMEOUT", 30.0)

    # Telegram (канал уведомлений о новых заказах)
    TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "")
    TELEGRAM_CHAT_ID: str = os.getenv("TELEGRAM_CHAT_ID", "")
    NOTIFICATION_TIMEOUT: float = _get_float("NOTIFICATION_TIMEOUT", 15.0)

    # Argon2id: параметры стоимости хэширования паролей.
    # Значения по умолчанию - рекомендация RFC 9106 для серверов с ограниченной памятью.
    PASSWORD_TIME_COST: int = _get_int("PASSWORD_TIME_COST", 3)
    PASSWORD_MEMORY_COST: int = _get_int("PASSWORD_MEMORY_COST", 65536)  # KiB
    PASSWORD_PARALLELISM: int = _get_int("PASSWORD_PARALLELISM", 4)

    # Строгая проверка графа переходов статусов заказа
    STRICT_TRANSITIONS: bool = _get_bool("STRICT_TRANSITIONS", True)

    # Логирование
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOGS_DIR: str = os.getenv("LOGS_DIR", "logs")

    # Мониторинг
    SENTRY_DSN: str = os.getenv("SENTRY_DSN", "")
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    @classmethod
    def notifications_enabled(cls) -> bool:
        """Настроен ли Telegram для уведомлений"""
        return bool(cls.TELEGRAM_BOT_TOKEN and cls.TELEGRAM_CHAT_ID)

    @classmethod
    def validate(cls) -> bool:
        """
        Проверка обязательных настроек

        Returns:
            True если конфигурация корректна

        Raises:
            ValueError: Если настройка отсутствует или некорректна
        """
        if not cls.DATABASE_PATH:
            raise ValueError("DATABASE_PATH не установлен")

        if cls.POOL_MAX_SIZE < 1:
            raise ValueError("POOL_MAX_SIZE должен быть не меньше 1")

        if cls.POOL_CONNECT_TIMEOUT <= 0:
            raise ValueError("POOL_CONNECT_TIMEOUT должен быть положительным")

        if bool(cls.TELEGRAM_BOT_TOKEN) != bool(cls.TELEGRAM_CHAT_ID):
            raise ValueError("TELEGRAM_BOT_TOKEN и TELEGRAM_CHAT_ID должны быть заданы вместе")

        return True
