"""
Тесты для вспомогательных функций
"""
from datetime import date, datetime, timedelta, timezone

import pytest

from puntodeagua.utils.helpers import (
    CARACAS_TZ,
    build_maps_link,
    build_whatsapp_link,
    escape_html,
    format_currency,
    from_db_timestamp,
    normalize_phone,
    parse_date,
    start_of_day,
    to_db_timestamp,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("0412-1234567", "584121234567"),  # национальный формат
        ("04121234567", "584121234567"),
        ("+58 412 123 4567", "584121234567"),  # уже с кодом страны
        ("584121234567", "584121234567"),
        ("(0414) 555.12.34", "584145551234"),
        ("4125551234", "584125551234"),  # без ведущего нуля
    ],
)
def test_normalize_phone(raw, expected):
    """Тест нормализации телефона для ссылок WhatsApp"""
    assert normalize_phone(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "sin teléfono"])
def test_normalize_phone_empty(raw):
    """Без цифр - пустая строка"""
    assert normalize_phone(raw) == ""


def test_build_whatsapp_link():
    assert build_whatsapp_link("584121234567") == "https://wa.me/584121234567"


def test_build_maps_link_encodes_address():
    """Адрес кодируется как encodeURIComponent"""
    link = build_maps_link("Calle 5 #12, Apto 3-B")
    assert link == (
        "https://www.google.com/maps/search/?api=1&query=Calle%205%20%2312%2C%20Apto%203-B"
    )


def test_build_maps_link_unicode():
    link = build_maps_link("Av. Bolívar")
    assert link.endswith("query=Av.%20Bol%C3%ADvar")


@pytest.mark.parametrize(
    ("amount", "expected"),
    [
        (10, "$10.00"),
        (1234.5, "$1,234.50"),
        (0, "$0.00"),
        (1000000, "$1,000,000.00"),
    ],
)
def test_format_currency(amount, expected):
    """Тест форматирования суммы в USD"""
    assert format_currency(amount) == expected


def test_escape_html():
    assert escape_html("<b>José & Co</b>") == "&lt;b&gt;José &amp; Co&lt;/b&gt;"
    assert escape_html(None) == ""


def test_db_timestamp_roundtrip_keeps_order():
    """Строковое сравнение меток совпадает с хронологическим"""
    earlier = datetime(2025, 3, 1, 23, 59, 59, 999999, tzinfo=CARACAS_TZ)
    later = datetime(2025, 3, 2, 4, 0, 0, tzinfo=timezone.utc)  # 00:00 по Каракасу

    assert to_db_timestamp(earlier) < to_db_timestamp(later)
    assert from_db_timestamp(to_db_timestamp(later)) == later


def test_start_of_day():
    moment = datetime(2025, 3, 5, 17, 45, tzinfo=CARACAS_TZ)
    assert start_of_day(moment) == datetime(2025, 3, 5, tzinfo=CARACAS_TZ)
    assert start_of_day(date(2025, 3, 5)) == datetime(2025, 3, 5, tzinfo=CARACAS_TZ)


def test_start_of_day_converts_timezone():
    """Время в UTC переводится в пояс Каракаса до отсечения"""
    moment = datetime(2025, 3, 6, 2, 0, tzinfo=timezone.utc)  # 5 марта 22:00 в Каракасе
    assert start_of_day(moment) == datetime(2025, 3, 5, tzinfo=CARACAS_TZ)
    assert start_of_day(moment).utcoffset() == timedelta(hours=-4)


def test_parse_date():
    assert parse_date("2025-03-05") == date(2025, 3, 5)
    assert parse_date("2025-03-05T10:00:00") == date(2025, 3, 5)
    assert parse_date(datetime(2025, 3, 5, 10, 0)) == date(2025, 3, 5)
    # 02:00 UTC - еще 5 марта в Каракасе
    assert parse_date("2025-03-06T02:00:00+00:00") == date(2025, 3, 5)


@pytest.mark.parametrize(
    "raw", ["05/03/2025", "yesterday", "2025-02-30", "2024-01-15garbage", "2024-01-15T25:00"]
)
def test_parse_date_invalid(raw):
    with pytest.raises(ValueError):
        parse_date(raw)
