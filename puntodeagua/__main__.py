"""
Командная строка для обслуживания

    python -m puntodeagua init-db
    python -m puntodeagua hash-password   (Argon2id; bcrypt-хэши не принимаются)
    python -m puntodeagua create-account --email admin@example.com --role admin ...
    python -m puntodeagua summary --period week
    python -m puntodeagua orders --status pending
"""

import argparse
import asyncio
import getpass
import logging
import sys

from puntodeagua.core.config import Config
from puntodeagua.core.exceptions import PuntoDeAguaError
from puntodeagua.database import Database
from puntodeagua.presenters import OrderPresenter
from puntodeagua.utils.helpers import format_currency
from puntodeagua.utils.logging_setup import setup_logging
from puntodeagua.utils.passwords import PasswordManager
from puntodeagua.utils.sentry import init_sentry


logger = logging.getLogger("puntodeagua.cli")


def _read_password(args: argparse.Namespace) -> str:
    if args.password:
        return args.password
    password = getpass.getpass("Пароль: ")
    if password != getpass.getpass("Повторите пароль: "):
        raise SystemExit("Пароли не совпадают")
    return password


async def init_db(args: argparse.Namespace) -> None:
    db = Database(args.database)
    await db.connect()
    try:
        await db.init_db()
    finally:
        await db.disconnect()
    print(f"База данных готова: {db.db_path}")


async def hash_password(args: argparse.Namespace) -> None:
    password = _read_password(args)
    print(PasswordManager().hash(password))


async def create_account(args: argparse.Namespace) -> None:
    password = _read_password(args)
    db = Database(args.database)
    await db.connect()
    try:
        await db.init_db()
        account = await db.services.account_service.create_account(
            {
                "email": args.email,
                "password": password,
                "first_name": args.first_name,
                "last_name": args.last_name,
                "phone": args.phone,
                "address": args.address,
                "role": args.role,
            }
        )
    finally:
        await db.disconnect()
    print(f"Создан аккаунт #{account.id} {account.email} ({account.role.value})")


async def summary(args: argparse.Namespace) -> None:
    db = Database(args.database)
    await db.connect()
    try:
        result = await db.services.reports_service.summarize(args.period)
    finally:
        await db.disconnect()

    since = result.since.strftime("%d/%m/%Y") if result.since else "-"
    print(f"Период: {result.period.value} (с {since})")
    print(f"Выручка: {format_currency(result.total_revenue)}")
    print(f"Бутыли 18L: {result.bottles_18l}")
    print(f"Бутыли 12L: {result.bottles_12l}")
    print(f"Бутыли 5L: {result.bottles_5l}")


async def list_orders(args: argparse.Namespace) -> None:
    db = Database(args.database)
    await db.connect()
    try:
        orders = await db.services.order_service.list_filtered(
            status=args.status, date_from=args.date_from, date_to=args.date_to
        )
    finally:
        await db.disconnect()

    for order in orders:
        print(OrderPresenter.format_order_short(order))
    print(f"Всего: {len(orders)}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="puntodeagua", description="Обслуживание сервиса заказов воды"
    )
    parser.add_argument(
        "--database",
        default=None,
        help=f"Путь к базе данных (по умолчанию: {Config.DATABASE_PATH})",
    )
    parser.add_argument("--log-level", default=None, help="Уровень логирования")
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init-db", help="Создать таблицы")
    init_parser.set_defaults(handler=init_db)

    hash_parser = subparsers.add_parser(
        "hash-password", help="Вывести Argon2id-хэш пароля (bcrypt-хэши не принимаются)"
    )
    hash_parser.add_argument("--password", help="Пароль (по умолчанию запрашивается)")
    hash_parser.set_defaults(handler=hash_password)

    account_parser = subparsers.add_parser("create-account", help="Создать аккаунт")
    account_parser.add_argument("--email", required=True)
    account_parser.add_argument("--password", help="Пароль (по умолчанию запрашивается)")
    account_parser.add_argument("--first-name", required=True)
    account_parser.add_argument("--last-name", required=True)
    account_parser.add_argument("--phone")
    account_parser.add_argument("--address")
    account_parser.add_argument(
        "--role", default="admin", help="customer, distributor или admin (по умолчанию: admin)"
    )
    account_parser.set_defaults(handler=create_account)

    summary_parser = subparsers.add_parser("summary", help="Сводка продаж")
    summary_parser.add_argument(
        "--period", default="total", help="today, week, month или total (по умолчанию: total)"
    )
    summary_parser.set_defaults(handler=summary)

    orders_parser = subparsers.add_parser("orders", help="Список заказов")
    orders_parser.add_argument("--status", help="Фильтр по статусу")
    orders_parser.add_argument("--date-from", help="С даты (YYYY-MM-DD)")
    orders_parser.add_argument("--date-to", help="По дату включительно (YYYY-MM-DD)")
    orders_parser.set_defaults(handler=list_orders)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(level=args.log_level)
    init_sentry()

    try:
        Config.validate()
        asyncio.run(args.handler(args))
    except PuntoDeAguaError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1
    except ValueError as e:
        logger.error("Ошибка конфигурации: %s", e)
        return 1
    except KeyboardInterrupt:
        logger.info("Прервано пользователем")
        return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
