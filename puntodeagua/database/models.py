"""
Модели данных
"""
from dataclasses import asdict, dataclass, field
from datetime import datetime

from puntodeagua.core.constants import AccountStatus, OrderStatus, ReportPeriod, UserRole


@dataclass
class Account:
    """Модель аккаунта (клиент, распределитель или администратор)"""
    id: int | None = None
    email: str = ""
    password_hash: str = field(default="", repr=False)
    first_name: str = ""
    last_name: str = ""
    phone: str | None = None
    address: str | None = None
    role: UserRole = UserRole.CUSTOMER
    status: AccountStatus = AccountStatus.ACTIVE
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_suspended(self) -> bool:
        return self.status == AccountStatus.SUSPENDED

    def get_full_name(self) -> str:
        """Получение полного имени"""
        full_name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return full_name or self.email

    def to_public_dict(self) -> dict:
        """
        Представление для ответа клиенту

        Хэш пароля никогда не покидает хранилище.
        """
        return {
            "id": self.id,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "phone": self.phone,
            "address": self.address,
            "role": self.role.value,
            "status": self.status.value,
        }


@dataclass
class Order:
    """Модель заказа"""
    id: int | None = None
    account_id: int = 0
    customer_name: str = ""
    customer_phone: str | None = None
    delivery_address: str = ""
    bottles_18l: int = 0
    bottles_12l: int = 0
    bottles_5l: int = 0
    payment_method: str = ""
    bank: str | None = None
    payment_reference: str | None = None
    total_cost: float = 0.0
    status: OrderStatus = OrderStatus.PENDING
    version: int = 1
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def get_bottles(self) -> dict[str, int]:
        """Количество бутылей по размерам"""
        return {"18L": self.bottles_18l, "12L": self.bottles_12l, "5L": self.bottles_5l}

    def to_dict(self) -> dict:
        """Словарь для сериализации (даты в ISO формате)"""
        data = asdict(self)
        data["status"] = self.status.value
        data["created_at"] = self.created_at.isoformat() if self.created_at else None
        data["updated_at"] = self.updated_at.isoformat() if self.updated_at else None
        return data


@dataclass
class StatusChange:
    """Запись истории изменения статуса заказа"""
    order_id: int
    old_status: OrderStatus | None
    new_status: OrderStatus
    changed_by: int | None = None
    changed_at: datetime | None = None
    notes: str | None = None


@dataclass
class SalesSummary:
    """Сводка продаж за период"""
    period: ReportPeriod
    total_revenue: float = 0.0
    bottles_18l: int = 0
    bottles_12l: int = 0
    bottles_5l: int = 0
    since: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "period": self.period.value,
            "total": f"{self.total_revenue:.2f}",
            "bottles_18l": self.bottles_18l,
            "bottles_12l": self.bottles_12l,
            "bottles_5l": self.bottles_5l,
            "since": self.since.isoformat() if self.since else None,
        }
