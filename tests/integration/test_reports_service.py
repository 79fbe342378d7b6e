"""
Интеграционные тесты для ReportsService
"""
from datetime import datetime

import pytest

from puntodeagua.core.constants import ReportPeriod
from puntodeagua.repositories import order_repository
from puntodeagua.utils.helpers import CARACAS_TZ


NOW = datetime(2025, 3, 9, 18, 0, tzinfo=CARACAS_TZ)  # воскресенье


async def place_at(services, monkeypatch, moment, order_data, status=None, **overrides):
    monkeypatch.setattr(order_repository, "get_now", lambda: moment)
    order = await services.order_service.place({**order_data, **overrides})
    if status:
        for step in status:
            await services.order_service.change_status(order.id, step)
    return order


class TestSummarize:
    """Тесты для summarize"""

    @pytest.mark.asyncio
    async def test_empty_database(self, services):
        summary = await services.reports_service.summarize("total")

        assert summary.total_revenue == 0
        assert (summary.bottles_18l, summary.bottles_12l, summary.bottles_5l) == (0, 0, 0)
        assert summary.to_dict()["total"] == "0.00"

    @pytest.mark.asyncio
    async def test_periods(self, services, order_data, monkeypatch):
        accepted = ["accepted"]
        delivered = ["accepted", "in_process", "in_transit", "delivered"]

        # Сегодня: доставлен
        await place_at(
            services, monkeypatch, NOW.replace(hour=9), order_data, delivered,
            total_cost=10.0, bottles={"18L": 2},
        )
        # Понедельник этой недели: принят
        await place_at(
            services, monkeypatch, datetime(2025, 3, 3, 0, 0, tzinfo=CARACAS_TZ), order_data,
            accepted, total_cost=5.25, bottles={"12L": 1, "5L": 3},
        )
        # Прошлое воскресенье (тот же месяц): доставлен
        await place_at(
            services, monkeypatch, datetime(2025, 3, 2, 12, 0, tzinfo=CARACAS_TZ), order_data,
            delivered, total_cost=7.5, bottles={"18L": 1},
        )
        # Прошлый месяц: доставлен
        await place_at(
            services, monkeypatch, datetime(2025, 2, 20, 12, 0, tzinfo=CARACAS_TZ), order_data,
            delivered, total_cost=100.0, bottles={"5L": 10},
        )
        # Не учитываются: pending, in_transit, rejected
        await place_at(services, monkeypatch, NOW.replace(hour=10), order_data, total_cost=50.0)
        await place_at(
            services, monkeypatch, NOW.replace(hour=11), order_data,
            ["accepted", "in_process", "in_transit"], total_cost=60.0,
        )
        await place_at(
            services, monkeypatch, NOW.replace(hour=12), order_data, ["rejected"], total_cost=70.0
        )

        reports = services.reports_service

        today = await reports.summarize("today", now=NOW)
        assert today.period == ReportPeriod.TODAY
        assert today.total_revenue == 10.0
        assert today.bottles_18l == 2

        week = await reports.summarize("week", now=NOW)
        assert week.total_revenue == 15.25
        assert (week.bottles_18l, week.bottles_12l, week.bottles_5l) == (2, 1, 3)
        assert week.since == datetime(2025, 3, 3, tzinfo=CARACAS_TZ)

        month = await reports.summarize("month", now=NOW)
        assert month.total_revenue == 22.75
        assert month.bottles_18l == 3

        total = await reports.summarize("total", now=NOW)
        assert total.total_revenue == 122.75
        assert total.bottles_5l == 13
        assert total.since is None

        unknown = await reports.summarize("year", now=NOW)
        assert unknown.period == ReportPeriod.TOTAL
        assert unknown.total_revenue == total.total_revenue

    @pytest.mark.asyncio
    async def test_revenue_rounded(self, services, order_data, monkeypatch):
        for _ in range(3):
            await place_at(services, monkeypatch, NOW, order_data, ["accepted"], total_cost=0.1)

        summary = await services.reports_service.summarize("total", now=NOW)
        assert summary.total_revenue == 0.3
        assert summary.to_dict()["total"] == "0.30"
