"""Ядро приложения - конфигурация, константы и исключения"""

from puntodeagua.core.config import Config
from puntodeagua.core.constants import (
    AccountStatus,
    BottleSize,
    OrderStatus,
    ReportPeriod,
    UserRole,
)


__all__ = [
    "AccountStatus",
    "BottleSize",
    "Config",
    "OrderStatus",
    "ReportPeriod",
    "UserRole",
]
