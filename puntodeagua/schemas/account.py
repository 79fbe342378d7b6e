"""Pydantic схемы для валидации аккаунтов"""
from typing import Any

from pydantic import BaseModel, Field, field_validator

from puntodeagua.core.constants import AccountStatus, UserRole


def _normalize_email(v: str) -> str:
    v = v.strip().lower()
    local, _, domain = v.partition("@")
    if not local or not domain or " " in v:
        raise ValueError("Некорректный email")
    return v


class AccountCreateSchema(BaseModel):
    """Схема для создания аккаунта администратором"""

    email: str = Field(..., min_length=3, max_length=254, description="Email (логин)")
    password: str = Field(..., min_length=6, max_length=128, description="Пароль в открытом виде")
    first_name: str = Field(..., min_length=1, max_length=100, description="Имя")
    last_name: str = Field(..., min_length=1, max_length=100, description="Фамилия")
    phone: str | None = Field(None, max_length=30, description="Телефон")
    address: str | None = Field(None, max_length=500, description="Адрес доставки по умолчанию")
    role: UserRole = Field(default=UserRole.CUSTOMER, description="Роль")

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        """Email хранится в нижнем регистре"""
        return _normalize_email(v)

    @field_validator("role", mode="before")
    @classmethod
    def validate_role(cls, v: Any) -> UserRole:
        """Валидация роли (принимаются и legacy-названия)"""
        if v is None or v == "":
            return UserRole.CUSTOMER
        return UserRole.parse(v)

    @field_validator("phone", "address")
    @classmethod
    def empty_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None

    class Config:
        str_strip_whitespace = True
        extra = "ignore"


class AccountRegisterSchema(AccountCreateSchema):
    """
    Схема для самостоятельной регистрации клиента

    Адрес обязателен, роль всегда customer.
    """

    address: str = Field(..., min_length=1, max_length=500, description="Адрес доставки")

    @field_validator("role", mode="before")
    @classmethod
    def validate_role(cls, v: Any) -> UserRole:
        """При регистрации роль не выбирается"""
        return UserRole.CUSTOMER


class AccountUpdateSchema(BaseModel):
    """
    Схема для частичного обновления профиля

    Учитываются только переданные поля (model_fields_set).
    """

    email: str | None = Field(None, min_length=3, max_length=254)
    password: str | None = Field(None, min_length=6, max_length=128)
    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    phone: str | None = Field(None, max_length=30)
    address: str | None = Field(None, max_length=500)
    role: UserRole | None = None
    status: AccountStatus | None = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return _normalize_email(v)

    @field_validator("role", mode="before")
    @classmethod
    def validate_role(cls, v: Any) -> UserRole | None:
        if v is None:
            return None
        return UserRole.parse(v)

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: Any) -> AccountStatus | None:
        if v is None:
            return None
        return AccountStatus.parse(v)

    def get_updates(self) -> dict[str, Any]:
        """
        Переданные поля без None

        Returns:
            Словарь {поле: значение}; пароль возвращается в открытом виде
        """
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if getattr(self, name) is not None
        }

    class Config:
        str_strip_whitespace = True
        extra = "ignore"
