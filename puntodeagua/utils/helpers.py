"""
Вспомогательные функции
"""

import logging
import re
from datetime import date, datetime, timedelta, timezone
from html import escape
from urllib.parse import quote


logger = logging.getLogger(__name__)


# Часовой пояс Каракаса (UTC-4, без перехода на летнее время)
CARACAS_TZ = timezone(timedelta(hours=-4))

COUNTRY_CODE = "58"
WHATSAPP_URL = "https://wa.me/"
GOOGLE_MAPS_SEARCH_URL = "https://www.google.com/maps/search/?api=1&query="


def get_now() -> datetime:
    """
    Получить текущее время в часовом поясе Каракаса

    Returns:
        datetime объект с timezone
    """
    return datetime.now(CARACAS_TZ)


def to_db_timestamp(dt: datetime) -> str:
    """
    Сериализация времени для хранения в БД

    Все метки хранятся в одном поясе и одном формате (с микросекундами),
    поэтому строковое сравнение в SQL совпадает с хронологическим.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=CARACAS_TZ)
    return dt.astimezone(CARACAS_TZ).isoformat(timespec="microseconds")


def from_db_timestamp(value: str | None) -> datetime | None:
    """Обратное преобразование метки времени из БД"""
    if not value:
        return None
    dt = datetime.fromisoformat(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=CARACAS_TZ)
    return dt


def start_of_day(value: date | datetime) -> datetime:
    """Начало календарного дня (00:00) в часовом поясе Каракаса"""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(CARACAS_TZ)
        value = value.date()
    return datetime(value.year, value.month, value.day, tzinfo=CARACAS_TZ)


def parse_date(value: date | datetime | str) -> date:
    """
    Разбор даты из фильтров (YYYY-MM-DD, date или datetime)

    Raises:
        ValueError: Если строка не является датой
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if len(text) == 10:
        return date.fromisoformat(text)

    # Полная ISO-метка разбирается целиком, мусор в хвосте - ошибка
    moment = datetime.fromisoformat(text)
    if moment.tzinfo is not None:
        moment = moment.astimezone(CARACAS_TZ)
    return moment.date()


def normalize_phone(phone: str | None) -> str:
    """
    Нормализация номера телефона для ссылок (WhatsApp)

    1. Удаляем все символы кроме цифр
    2. Убираем один ведущий '0' (национальный префикс)
    3. Добавляем код страны 58, если его нет

    Args:
        phone: Номер в свободной форме ("0412-1234567")

    Returns:
        Номер в виде цифр с кодом страны ("584121234567") или пустая строка
    """
    if not phone:
        return ""

    digits = re.sub(r"\D", "", phone)
    if not digits:
        return ""

    if digits.startswith("0"):
        digits = digits[1:]
    if not digits.startswith(COUNTRY_CODE):
        digits = COUNTRY_CODE + digits

    return digits


def build_whatsapp_link(normalized_phone: str) -> str:
    """Ссылка на чат WhatsApp для нормализованного номера"""
    return f"{WHATSAPP_URL}{normalized_phone}"


def build_maps_link(address: str) -> str:
    """Ссылка на поиск адреса в Google Maps (адрес кодируется как в encodeURIComponent)"""
    return GOOGLE_MAPS_SEARCH_URL + quote(address, safe="-_.!~*'()")


def format_currency(amount: float) -> str:
    """
    Форматирование суммы в долларах

    Example:
        1234.5 -> "$1,234.50"
    """
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_datetime(dt: datetime) -> str:
    """
    Форматирование даты и времени

    Args:
        dt: Объект datetime

    Returns:
        Строка с датой и временем
    """
    return dt.strftime("%d/%m/%Y %H:%M")


def escape_html(text: str | None) -> str:
    """
    Экранирование специальных символов для HTML

    Защита от HTML injection при использовании parse_mode="HTML"

    Args:
        text: Исходный текст

    Returns:
        Экранированный текст безопасный для HTML
    """
    if text is None:
        return ""
    return escape(str(text))
