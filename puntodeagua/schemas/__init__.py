"""Pydantic schemas package"""
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from puntodeagua.core.exceptions import ValidationError
from puntodeagua.schemas.account import (
    AccountCreateSchema,
    AccountRegisterSchema,
    AccountUpdateSchema,
)
from puntodeagua.schemas.order import OrderCreateSchema


SchemaT = TypeVar("SchemaT", bound=BaseModel)


def validate_payload(schema: type[SchemaT], data: Any) -> SchemaT:
    """
    Валидация входных данных схемой

    Ошибки pydantic преобразуются в ValidationError приложения. Входные
    значения в ошибки не попадают (там может быть пароль).

    Raises:
        ValidationError: Данные не прошли валидацию
    """
    if isinstance(data, schema):
        return data
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        errors = e.errors(include_url=False, include_context=False, include_input=False)
        fields = ", ".join(
            ".".join(str(part) for part in error["loc"]) or "__root__" for error in errors
        )
        raise ValidationError(f"Ошибка валидации: {fields}", errors=errors) from e


__all__ = [
    # Account schemas
    "AccountCreateSchema",
    "AccountRegisterSchema",
    "AccountUpdateSchema",
    # Order schemas
    "OrderCreateSchema",
    "validate_payload",
]
