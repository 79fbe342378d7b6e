"""
Service layer: бизнес-логика поверх репозиториев
"""

from puntodeagua.services.account_service import AccountService
from puntodeagua.services.notifications import (
    LoggingNotificationSink,
    NotificationDispatcher,
    NotificationSink,
    TelegramNotificationSink,
)
from puntodeagua.services.order_service import OrderService
from puntodeagua.services.reports_service import ReportsService, period_start
from puntodeagua.services.service_factory import ServiceFactory


__all__ = [
    "AccountService",
    "LoggingNotificationSink",
    "NotificationDispatcher",
    "NotificationSink",
    "OrderService",
    "ReportsService",
    "ServiceFactory",
    "TelegramNotificationSink",
    "period_start",
]
