"""
Константы приложения - роли, статусы аккаунтов и заказов, периоды отчетов
"""

from enum import Enum


# Верхняя граница INTEGER в SQLite (знаковое 64-битное целое)
MAX_ENTITY_ID = 2**63 - 1


class UserRole(str, Enum):
    """Роли пользователей"""

    CUSTOMER = "customer"
    DISTRIBUTOR = "distributor"
    ADMIN = "admin"

    @classmethod
    def all_roles(cls) -> list["UserRole"]:
        """Список всех ролей"""
        return [cls.CUSTOMER, cls.DISTRIBUTOR, cls.ADMIN]

    @classmethod
    def parse(cls, value: "str | UserRole") -> "UserRole":
        """
        Разбор роли из строки (без учета регистра)

        Принимает также legacy-значения старого сервиса ("cliente", "distribuidor").

        Raises:
            ValueError: Если роль не входит в закрытый набор
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        key = _LEGACY_ROLES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            allowed = ", ".join(role.value for role in cls.all_roles())
            raise ValueError(f"Недопустимая роль: {value!r}. Допустимые: {allowed}") from None


_LEGACY_ROLES = {
    "cliente": UserRole.CUSTOMER.value,
    "distribuidor": UserRole.DISTRIBUTOR.value,
}


class AccountStatus(str, Enum):
    """Статусы аккаунтов"""

    ACTIVE = "active"
    SUSPENDED = "suspended"

    @classmethod
    def parse(cls, value: "str | AccountStatus") -> "AccountStatus":
        """Разбор статуса аккаунта из строки (без учета регистра)"""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        key = {"activo": cls.ACTIVE.value, "suspendido": cls.SUSPENDED.value}.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise ValueError(
                f"Недопустимый статус аккаунта: {value!r}. Допустимые: active, suspended"
            ) from None


class OrderStatus(str, Enum):
    """Статусы заказов"""

    PENDING = "pending"  # Новый заказ, ждет распределителя
    ACCEPTED = "accepted"  # Принят распределителем
    IN_PROCESS = "in_process"  # Готовится
    IN_TRANSIT = "in_transit"  # В пути к клиенту
    DELIVERED = "delivered"  # Доставлен
    REJECTED = "rejected"  # Отклонен

    @classmethod
    def all_statuses(cls) -> list["OrderStatus"]:
        """Список всех статусов"""
        return [
            cls.PENDING,
            cls.ACCEPTED,
            cls.IN_PROCESS,
            cls.IN_TRANSIT,
            cls.DELIVERED,
            cls.REJECTED,
        ]

    @classmethod
    def in_flight(cls) -> list["OrderStatus"]:
        """Статусы заказов в работе у распределителя"""
        return [cls.ACCEPTED, cls.IN_PROCESS, cls.IN_TRANSIT]

    @classmethod
    def revenue(cls) -> list["OrderStatus"]:
        """Статусы, которые учитываются в отчетах по выручке"""
        return [cls.DELIVERED, cls.ACCEPTED]

    @classmethod
    def parse(cls, value: "str | OrderStatus") -> "OrderStatus":
        """
        Разбор статуса из строки без учета регистра

        Принимает каноничные значения ("in_process"), варианты с пробелом или
        дефисом ("in process") и испанские названия старого сервиса
        ("en proceso", "entregado" и т.д.)

        Raises:
            ValueError: Если статус не входит в закрытый набор
        """
        if isinstance(value, cls):
            return value
        if value is None:
            raise ValueError("Статус не указан")
        key = str(value).strip().lower()
        key = _LEGACY_STATUSES.get(key, key.replace(" ", "_").replace("-", "_"))
        try:
            return cls(key)
        except ValueError:
            allowed = ", ".join(status.value for status in cls.all_statuses())
            raise ValueError(f"Недопустимый статус заказа: {value!r}. Допустимые: {allowed}") from None

    @classmethod
    def get_status_emoji(cls, status: "str | OrderStatus") -> str:
        """Получение эмодзи для статуса"""
        emojis = {
            cls.PENDING: "🆕",
            cls.ACCEPTED: "✅",
            cls.IN_PROCESS: "🏭",
            cls.IN_TRANSIT: "🚚",
            cls.DELIVERED: "💧",
            cls.REJECTED: "❌",
        }
        return emojis.get(status, "")

    @classmethod
    def get_status_name(cls, status: "str | OrderStatus") -> str:
        """Получение отображаемого названия статуса (на испанском, как видят клиенты)"""
        names = {
            cls.PENDING: "Pendiente",
            cls.ACCEPTED: "Aceptado",
            cls.IN_PROCESS: "En proceso",
            cls.IN_TRANSIT: "En camino",
            cls.DELIVERED: "Entregado",
            cls.REJECTED: "Rechazado",
        }
        return names.get(status, str(status))


_LEGACY_STATUSES = {
    "pendiente": OrderStatus.PENDING.value,
    "aceptado": OrderStatus.ACCEPTED.value,
    "en proceso": OrderStatus.IN_PROCESS.value,
    "en camino": OrderStatus.IN_TRANSIT.value,
    "entregado": OrderStatus.DELIVERED.value,
    "rechazado": OrderStatus.REJECTED.value,
}


class ReportPeriod(str, Enum):
    """Периоды для сводки продаж"""

    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    TOTAL = "total"

    @classmethod
    def parse(cls, value: "str | ReportPeriod | None") -> "ReportPeriod":
        """Неизвестный или пустой период трактуется как TOTAL"""
        if isinstance(value, cls):
            return value
        if not value:
            return cls.TOTAL
        key = str(value).strip().lower()
        key = {"hoy": "today", "semana": "week", "mes": "month"}.get(key, key)
        try:
            return cls(key)
        except ValueError:
            return cls.TOTAL


class BottleSize:
    """Размеры бутылей (ключи во входных данных заказа)"""

    LITERS_18 = "18L"
    LITERS_12 = "12L"
    LITERS_5 = "5L"

    @classmethod
    def all_sizes(cls) -> list[str]:
        """Список всех размеров в порядке отображения"""
        return [cls.LITERS_18, cls.LITERS_12, cls.LITERS_5]
