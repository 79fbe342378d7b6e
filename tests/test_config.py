"""
Тесты для модуля config и констант
"""
import pytest

from puntodeagua.core.config import Config
from puntodeagua.core.constants import AccountStatus, OrderStatus, ReportPeriod, UserRole


class TestUserRole:
    """Тесты для класса UserRole"""

    def test_all_roles(self):
        """Тест получения всех ролей"""
        roles = UserRole.all_roles()
        assert roles == [UserRole.CUSTOMER, UserRole.DISTRIBUTOR, UserRole.ADMIN]

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("admin", UserRole.ADMIN),
            ("ADMIN", UserRole.ADMIN),
            (" Distributor ", UserRole.DISTRIBUTOR),
            ("cliente", UserRole.CUSTOMER),
            ("distribuidor", UserRole.DISTRIBUTOR),
        ],
    )
    def test_parse(self, raw, expected):
        """Тест разбора роли без учета регистра"""
        assert UserRole.parse(raw) == expected

    def test_parse_unknown(self):
        """Неизвестная роль - ValueError"""
        with pytest.raises(ValueError):
            UserRole.parse("superuser")


class TestAccountStatus:
    """Тесты для класса AccountStatus"""

    def test_parse(self):
        assert AccountStatus.parse("Suspended") == AccountStatus.SUSPENDED
        assert AccountStatus.parse("activo") == AccountStatus.ACTIVE

    def test_parse_unknown(self):
        with pytest.raises(ValueError):
            AccountStatus.parse("deleted")


class TestOrderStatus:
    """Тесты для класса OrderStatus"""

    def test_all_statuses(self):
        """Тест получения всех статусов"""
        statuses = OrderStatus.all_statuses()
        assert len(statuses) == 6
        assert OrderStatus.PENDING in statuses
        assert OrderStatus.REJECTED in statuses

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("pending", OrderStatus.PENDING),
            ("IN_TRANSIT", OrderStatus.IN_TRANSIT),
            ("in process", OrderStatus.IN_PROCESS),
            ("in-process", OrderStatus.IN_PROCESS),
            ("En Proceso", OrderStatus.IN_PROCESS),
            ("entregado", OrderStatus.DELIVERED),
            ("rechazado", OrderStatus.REJECTED),
        ],
    )
    def test_parse(self, raw, expected):
        """Тест разбора статуса (включая legacy-названия)"""
        assert OrderStatus.parse(raw) == expected

    @pytest.mark.parametrize("raw", ["shipped", "", None])
    def test_parse_invalid(self, raw):
        with pytest.raises(ValueError):
            OrderStatus.parse(raw)

    def test_revenue_statuses(self):
        """В выручку идут только принятые и доставленные"""
        assert set(OrderStatus.revenue()) == {OrderStatus.DELIVERED, OrderStatus.ACCEPTED}

    def test_get_status_name(self):
        assert OrderStatus.get_status_name(OrderStatus.IN_TRANSIT) == "En camino"
        assert OrderStatus.get_status_emoji(OrderStatus.PENDING) == "🆕"


class TestReportPeriod:
    """Тесты для класса ReportPeriod"""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("today", ReportPeriod.TODAY),
            ("WEEK", ReportPeriod.WEEK),
            ("mes", ReportPeriod.MONTH),
            ("total", ReportPeriod.TOTAL),
            ("year", ReportPeriod.TOTAL),
            (None, ReportPeriod.TOTAL),
            ("", ReportPeriod.TOTAL),
        ],
    )
    def test_parse(self, raw, expected):
        """Неизвестный период трактуется как total"""
        assert ReportPeriod.parse(raw) == expected


class TestConfig:
    """Тесты для класса Config"""

    def test_validate_defaults(self, monkeypatch):
        monkeypatch.setattr(Config, "TELEGRAM_BOT_TOKEN", "")
        monkeypatch.setattr(Config, "TELEGRAM_CHAT_ID", "")
        assert Config.validate() is True
        assert Config.notifications_enabled() is False

    def test_validate_pool_size(self, monkeypatch):
        monkeypatch.setattr(Config, "POOL_MAX_SIZE", 0)
        with pytest.raises(ValueError, match="POOL_MAX_SIZE"):
            Config.validate()

    def test_validate_telegram_pair(self, monkeypatch):
        """Токен без ID чата - ошибка конфигурации"""
        monkeypatch.setattr(Config, "TELEGRAM_BOT_TOKEN", "123:abc")
        monkeypatch.setattr(Config, "TELEGRAM_CHAT_ID", "")
        with pytest.raises(ValueError, match="TELEGRAM_CHAT_ID"):
            Config.validate()

    def test_notifications_enabled(self, monkeypatch):
        monkeypatch.setattr(Config, "TELEGRAM_BOT_TOKEN", "123:abc")
        monkeypatch.setattr(Config, "TELEGRAM_CHAT_ID", "-100200300")
        assert Config.notifications_enabled() is True
