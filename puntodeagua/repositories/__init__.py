"""
Repository layer для абстракции работы с базой данных
"""

from puntodeagua.repositories.account_repository import AccountRepository
from puntodeagua.repositories.base import BaseRepository
from puntodeagua.repositories.order_repository import OrderRepository


__all__ = [
    "AccountRepository",
    "BaseRepository",
    "OrderRepository",
]
