"""Утилиты и вспомогательные функции"""
from puntodeagua.utils.helpers import (
    CARACAS_TZ,
    build_maps_link,
    build_whatsapp_link,
    escape_html,
    format_currency,
    format_datetime,
    from_db_timestamp,
    get_now,
    normalize_phone,
    parse_date,
    start_of_day,
    to_db_timestamp,
)


__all__ = [
    "CARACAS_TZ",
    "build_maps_link",
    "build_whatsapp_link",
    "escape_html",
    "format_currency",
    "format_datetime",
    "from_db_timestamp",
    "get_now",
    "normalize_phone",
    "parse_date",
    "start_of_day",
    "to_db_timestamp",
]
