"""
Сервис для сводки продаж
"""

import logging
from datetime import datetime, timedelta

from puntodeagua.core.constants import OrderStatus, ReportPeriod
from puntodeagua.database.models import SalesSummary
from puntodeagua.repositories import OrderRepository
from puntodeagua.utils.helpers import get_now, start_of_day


logger = logging.getLogger(__name__)


def period_start(period: ReportPeriod | str | None, now: datetime) -> datetime | None:
    """
    Нижняя граница периода

    Неделя начинается в понедельник: в воскресенье граница - понедельник
    шесть дней назад.

    Args:
        period: Период (неизвестный трактуется как total)
        now: Текущее время

    Returns:
        Начало периода или None для total
    """
    period = ReportPeriod.parse(period)
    today = start_of_day(now)

    if period == ReportPeriod.TODAY:
        return today
    if period == ReportPeriod.WEEK:
        return today - timedelta(days=today.weekday())
    if period == ReportPeriod.MONTH:
        return today.replace(day=1)
    return None


class ReportsService:
    """Сервис для сводки выручки и проданных бутылей"""

    def __init__(self, order_repo: OrderRepository):
        self.order_repo = order_repo

    async def summarize(
        self, period: ReportPeriod | str | None = None, now: datetime | None = None
    ) -> SalesSummary:
        """
        Сводка по принятым и доставленным заказам за период

        Args:
            period: today, week, month или total
            now: Текущее время (по умолчанию get_now())

        Returns:
            SalesSummary с выручкой (2 знака) и количеством бутылей
        """
        report_period = ReportPeriod.parse(period)
        since = period_start(report_period, now or get_now())

        row = await self.order_repo.get_sales_totals(OrderStatus.revenue(), since=since)

        summary = SalesSummary(
            period=report_period,
            total_revenue=round(float(row["total_revenue"] or 0), 2),
            bottles_18l=int(row["total_18l"] or 0),
            bottles_12l=int(row["total_12l"] or 0),
            bottles_5l=int(row["total_5l"] or 0),
            since=since,
        )

        logger.debug(
            "Сводка %s: %.2f USD, бутыли 18L=%d 12L=%d 5L=%d",
            report_period.value,
            summary.total_revenue,
            summary.bottles_18l,
            summary.bottles_12l,
            summary.bottles_5l,
        )
        return summary
