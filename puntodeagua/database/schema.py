"""
Таблицы базы данных (SQLAlchemy Core)

Время хранится строками ISO-8601 в часовом поясе Каракаса с микросекундами:
лексикографический порядок совпадает с хронологическим.
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    Float,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)


metadata = MetaData()


accounts = Table(
    "accounts",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", String(255), nullable=False),
    Column("first_name", String(255), nullable=False),
    Column("last_name", String(255), nullable=False, server_default=""),
    Column("phone", String(50), nullable=True),
    Column("address", Text, nullable=True),
    Column("role", String(20), nullable=False, server_default="customer"),
    Column("status", String(20), nullable=False, server_default="active"),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
    Index("idx_accounts_role", "role"),
    CheckConstraint("role IN ('customer', 'distributor', 'admin')", name="chk_accounts_role"),
    CheckConstraint("status IN ('active', 'suspended')", name="chk_accounts_status"),
    sqlite_autoincrement=True,
)


# account_id намеренно без ForeignKey: заказы переживают удаление аккаунта
orders = Table(
    "orders",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("account_id", Integer, nullable=False),
    Column("customer_name", String(255), nullable=False),
    Column("customer_phone", String(50), nullable=True),
    Column("delivery_address", Text, nullable=False),
    Column("bottles_18l", Integer, nullable=False, server_default="0"),
    Column("bottles_12l", Integer, nullable=False, server_default="0"),
    Column("bottles_5l", Integer, nullable=False, server_default="0"),
    Column("payment_method", String(50), nullable=False),
    Column("bank", String(100), nullable=True),
    Column("payment_reference", String(100), nullable=True),
    Column("total_cost", Float, nullable=False),
    Column("status", String(20), nullable=False, server_default="pending"),
    Column("version", Integer, nullable=False, server_default="1"),
    Column("created_at", String(32), nullable=False),
    Column("updated_at", String(32), nullable=False),
    Index("idx_orders_account_created", "account_id", "created_at"),
    Index("idx_orders_status_created", "status", "created_at"),
    Index("idx_orders_created", "created_at"),
    CheckConstraint("bottles_18l >= 0", name="chk_orders_bottles_18l"),
    CheckConstraint("bottles_12l >= 0", name="chk_orders_bottles_12l"),
    CheckConstraint("bottles_5l >= 0", name="chk_orders_bottles_5l"),
    CheckConstraint(
        "status IN ('pending', 'accepted', 'in_process', 'in_transit', 'delivered', 'rejected')",
        name="chk_orders_status",
    ),
    sqlite_autoincrement=True,
)


order_status_history = Table(
    "order_status_history",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("order_id", Integer, nullable=False),
    Column("old_status", String(20), nullable=True),
    Column("new_status", String(20), nullable=False),
    Column("changed_by", Integer, nullable=True),
    Column("changed_at", String(32), nullable=False),
    Column("notes", Text, nullable=True),
    Index("idx_status_history_order", "order_id"),
    sqlite_autoincrement=True,
)
