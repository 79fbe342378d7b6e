"""
OrderPresenter - форматирование заказов для отображения
"""

from puntodeagua.core.constants import BottleSize, OrderStatus
from puntodeagua.database.models import Order
from puntodeagua.utils.helpers import (
    build_maps_link,
    build_whatsapp_link,
    escape_html,
    format_currency,
    format_datetime,
    normalize_phone,
)


class OrderPresenter:
    """Presenter для форматирования заказов"""

    @staticmethod
    def format_bottle_lines(order: Order) -> list[str]:
        """
        Строки детализации заказа по размерам бутылей

        Размеры с нулевым количеством пропускаются.

        Example:
            2 бутыли 18 л -> "2 botellones de 18Lts"
        """
        lines = []
        bottles = order.get_bottles()
        for size in BottleSize.all_sizes():
            quantity = bottles.get(size, 0)
            if quantity > 0:
                liters = size.rstrip("L")
                lines.append(f"{quantity} botellones de {liters}Lts")
        return lines

    @staticmethod
    def format_phone_link(phone: str | None) -> str:
        """HTML-ссылка на WhatsApp клиента (или пометка, если телефона нет)"""
        normalized = normalize_phone(phone)
        if not normalized:
            return "<i>no indicado</i>"
        return f'<a href="{build_whatsapp_link(normalized)}">+{normalized}</a>'

    @staticmethod
    def format_new_order_notification(order: Order) -> str:
        """
        Сообщение о новом заказе для чата распределителей (parse_mode="HTML")

        Args:
            order: Только что созданный заказ

        Returns:
            Текст сообщения
        """
        address = order.delivery_address or ""
        created_at = format_datetime(order.created_at) if order.created_at else ""

        text = "<b>💧 Nuevo Pedido de Botellones 💧</b>\n\n"
        text += f"<b>👤 Cliente:</b> {escape_html(order.customer_name)}\n"
        text += f"<b>📞 Teléfono:</b> {OrderPresenter.format_phone_link(order.customer_phone)}\n"
        text += (
            f'<b>📍 Dirección:</b> <a href="{escape_html(build_maps_link(address))}">'
            f"{escape_html(address)}</a>\n"
        )
        text += f"<b>📅 Fecha de Pedido:</b> {created_at}\n\n"

        text += "<b>📦 Detalle del Pedido:</b>\n"
        for line in OrderPresenter.format_bottle_lines(order):
            text += f"  - {line}\n"
        text += "\n<i>📝 Los precios incluyen recarga y servicio a domicilio.</i>\n"
        text += f"<b>💲 Total a Pagar:</b> {format_currency(order.total_cost)}\n\n"

        text += f"<b>💳 Método de Pago:</b> {escape_html(order.payment_method)}\n"
        if order.bank:
            text += f"<b>🏦 Banco:</b> {escape_html(order.bank)}\n"
        if order.payment_reference:
            text += f"<b>🔢 Referencia:</b> {escape_html(order.payment_reference)}\n"

        return text

    @staticmethod
    def format_order_short(order: Order) -> str:
        """Краткая строка для списков (CLI, логи)"""
        status_emoji = OrderStatus.get_status_emoji(order.status)
        status_name = OrderStatus.get_status_name(order.status)
        bottles = ", ".join(OrderPresenter.format_bottle_lines(order)) or "-"
        return (
            f"#{order.id} {status_emoji} {status_name} | {order.customer_name} | "
            f"{bottles} | {format_currency(order.total_cost)}"
        )
