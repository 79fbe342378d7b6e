"""
Unit tests for Presenters
"""

from datetime import datetime

from puntodeagua.core.constants import OrderStatus
from puntodeagua.database.models import Order
from puntodeagua.presenters import OrderPresenter
from puntodeagua.utils.helpers import CARACAS_TZ


def make_order(**overrides) -> Order:
    data = {
        "id": 42,
        "account_id": 7,
        "customer_name": "María Pérez",
        "customer_phone": "0412-1234567",
        "delivery_address": "Av. Bolívar, Apto 3-B",
        "bottles_18l": 2,
        "bottles_12l": 0,
        "bottles_5l": 0,
        "payment_method": "cash",
        "total_cost": 10.0,
        "status": OrderStatus.PENDING,
        "created_at": datetime(2025, 3, 5, 14, 30, tzinfo=CARACAS_TZ),
    }
    data.update(overrides)
    return Order(**data)


class TestOrderPresenter:
    """Tests for OrderPresenter"""

    def test_bottle_lines_skip_zero_quantities(self):
        lines = OrderPresenter.format_bottle_lines(make_order())
        assert lines == ["2 botellones de 18Lts"]

    def test_bottle_lines_all_sizes(self):
        order = make_order(bottles_18l=1, bottles_12l=3, bottles_5l=4)
        assert OrderPresenter.format_bottle_lines(order) == [
            "1 botellones de 18Lts",
            "3 botellones de 12Lts",
            "4 botellones de 5Lts",
        ]

    def test_new_order_notification(self):
        """Test full notification text"""
        text = OrderPresenter.format_new_order_notification(make_order())

        assert text.startswith("<b>💧 Nuevo Pedido de Botellones 💧</b>\n\n")
        assert "<b>👤 Cliente:</b> María Pérez\n" in text
        assert '<a href="https://wa.me/584121234567">+584121234567</a>' in text
        assert "https://www.google.com/maps/search/?api=1&amp;query=Av.%20Bol%C3%ADvar" in text
        assert ">Av. Bolívar, Apto 3-B</a>" in text
        assert "<b>📅 Fecha de Pedido:</b> 05/03/2025 14:30\n" in text
        assert "  - 2 botellones de 18Lts\n" in text
        assert "12Lts" not in text
        assert "5Lts" not in text
        assert "<b>💲 Total a Pagar:</b> $10.00\n" in text
        assert "<b>💳 Método de Pago:</b> cash\n" in text
        assert "Banco" not in text
        assert "Referencia" not in text

    def test_notification_with_bank_and_reference(self):
        order = make_order(payment_method="pago_movil", bank="Banesco", payment_reference="001234")
        text = OrderPresenter.format_new_order_notification(order)

        assert "<b>🏦 Banco:</b> Banesco\n" in text
        assert "<b>🔢 Referencia:</b> 001234\n" in text

    def test_notification_escapes_user_input(self):
        order = make_order(customer_name="<script>alert(1)</script>")
        text = OrderPresenter.format_new_order_notification(order)

        assert "<script>" not in text
        assert "&lt;script&gt;" in text

    def test_notification_without_phone(self):
        text = OrderPresenter.format_new_order_notification(make_order(customer_phone=None))
        assert "wa.me" not in text
        assert "<b>📞 Teléfono:</b> <i>no indicado</i>" in text

    def test_total_formatting(self):
        text = OrderPresenter.format_new_order_notification(make_order(total_cost=1234.5))
        assert "$1,234.50" in text

    def test_format_order_short(self):
        """Test short order formatting"""
        result = OrderPresenter.format_order_short(make_order())

        assert "#42" in result
        assert "María Pérez" in result
        assert "🆕" in result
        assert "$10.00" in result
