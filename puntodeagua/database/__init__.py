"""
Модуль работы с базой данных
"""

from puntodeagua.database.db import Database
from puntodeagua.database.engine import create_engine
from puntodeagua.database.models import Account, Order, SalesSummary, StatusChange


__all__ = [
    "Account",
    "Database",
    "Order",
    "SalesSummary",
    "StatusChange",
    "create_engine",
]
