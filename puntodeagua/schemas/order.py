"""Pydantic схемы для валидации заказов"""
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from puntodeagua.core.constants import MAX_ENTITY_ID, BottleSize


BOTTLE_FIELDS = {
    BottleSize.LITERS_18: "bottles_18l",
    BottleSize.LITERS_12: "bottles_12l",
    BottleSize.LITERS_5: "bottles_5l",
}


class OrderCreateSchema(BaseModel):
    """Схема для оформления заказа"""

    account_id: int = Field(..., gt=0, le=MAX_ENTITY_ID, description="ID аккаунта клиента")
    customer_name: str = Field(..., min_length=1, max_length=200, description="Имя клиента")
    customer_phone: str | None = Field(None, max_length=30, description="Телефон клиента")
    delivery_address: str = Field(..., min_length=1, max_length=500, description="Адрес доставки")
    bottles_18l: int = Field(0, ge=0, le=10_000, description="Бутыли 18 л")
    bottles_12l: int = Field(0, ge=0, le=10_000, description="Бутыли 12 л")
    bottles_5l: int = Field(0, ge=0, le=10_000, description="Бутыли 5 л")
    payment_method: str = Field(..., min_length=1, max_length=50, description="Способ оплаты")
    bank: str | None = Field(None, max_length=100, description="Банк")
    payment_reference: str | None = Field(None, max_length=100, description="Номер платежа")
    total_cost: float = Field(..., ge=0, description="Итоговая сумма, USD")

    @model_validator(mode="before")
    @classmethod
    def expand_bottles(cls, data: Any) -> Any:
        """
        Разворачивание количества бутылей из словаря {"18L": 2, "12L": 0, "5L": 1}

        Отсутствующие размеры считаются нулем. Значения, переданные
        отдельными полями, имеют приоритет над словарем.
        """
        if not isinstance(data, dict) or "bottles" not in data:
            return data

        data = dict(data)
        bottles = data.pop("bottles")
        if bottles is None:
            return data
        if not isinstance(bottles, dict):
            raise ValueError("bottles должен быть объектом вида {\"18L\": n, \"12L\": n, \"5L\": n}")

        normalized = {str(key).strip().upper(): value for key, value in bottles.items()}
        unknown = set(normalized) - set(BOTTLE_FIELDS)
        if unknown:
            raise ValueError(f"Неизвестный размер бутыли: {', '.join(sorted(unknown))}")

        for size, field_name in BOTTLE_FIELDS.items():
            if data.get(field_name) is None:
                data[field_name] = normalized.get(size) or 0

        return data

    @field_validator("bottles_18l", "bottles_12l", "bottles_5l", mode="before")
    @classmethod
    def default_missing_quantity(cls, v: Any) -> Any:
        """null в количестве трактуется как ноль"""
        return 0 if v is None else v

    @field_validator("customer_name", "delivery_address", "payment_method")
    @classmethod
    def validate_required_text(cls, v: str) -> str:
        """Обязательные текстовые поля не могут состоять из пробелов"""
        v = v.strip()
        if not v:
            raise ValueError("Поле обязательно для заполнения")
        return v

    @field_validator("customer_phone", "bank", "payment_reference")
    @classmethod
    def empty_to_none(cls, v: str | None) -> str | None:
        """Пустые необязательные поля сохраняются как NULL"""
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("total_cost")
    @classmethod
    def round_total_cost(cls, v: float) -> float:
        """Сумма хранится с точностью до цента"""
        return round(v, 2)

    class Config:
        """Конфигурация Pydantic схемы"""

        str_strip_whitespace = True
        extra = "ignore"
