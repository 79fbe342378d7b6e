"""
Async engine SQLAlchemy поверх aiosqlite

Пулом соединений управляет SQLAlchemy:

- не больше pool_size одновременно выданных соединений (overflow отключен)
- ожидание свободного соединения ограничено pool_timeout,
  по истечении - sqlalchemy.exc.TimeoutError
- соединения старше pool_recycle пересоздаются, pool_pre_ping отбраковывает мертвые

Транзакции начинаются явным BEGIN. Режим берется из execution option
"begin_mode": репозитории открывают пишущие транзакции как BEGIN IMMEDIATE,
чтобы блокировка на запись бралась сразу.
"""

import logging

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool


logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"


def database_url(db_path: str) -> str:
    """URL базы данных для драйвера aiosqlite"""
    return f"sqlite+aiosqlite:///{db_path}"


def create_engine(
    db_path: str,
    pool_size: int = 20,
    connect_timeout: float = 10.0,
    recycle: float = 30.0,
) -> AsyncEngine:
    """
    Создание async engine

    Args:
        db_path: Путь к файлу БД (":memory:" - одно общее соединение, для тестов)
        pool_size: Максимум одновременно выданных соединений
        connect_timeout: Ожидание свободного соединения и блокировки SQLite, секунды
        recycle: Возраст соединения, после которого оно пересоздается, секунды

    Returns:
        AsyncEngine
    """
    if pool_size < 1:
        raise ValueError("pool_size должен быть не меньше 1")

    is_memory = db_path == MEMORY_PATH
    connect_args = {"check_same_thread": False, "timeout": connect_timeout}

    if is_memory:
        # Каждое новое соединение открывало бы свою пустую БД
        engine = create_async_engine(
            database_url(db_path),
            echo=False,
            poolclass=StaticPool,
            connect_args=connect_args,
        )
    else:
        engine = create_async_engine(
            database_url(db_path),
            echo=False,
            pool_size=pool_size,
            max_overflow=0,
            pool_timeout=connect_timeout,
            pool_recycle=recycle,
            pool_pre_ping=True,
            connect_args=connect_args,
        )

    _install_listeners(engine, use_wal=not is_memory)
    logger.debug("Engine создан: %s (pool_size=%d)", db_path, pool_size)
    return engine


def _install_listeners(engine: AsyncEngine, use_wal: bool) -> None:
    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # Драйвер не открывает транзакции сам, BEGIN выдает _on_begin
        dbapi_connection.isolation_level = None
        if not use_wal:
            return
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA journal_mode")
            (mode,) = cursor.fetchone()
            if str(mode).lower() != "wal":
                cursor.execute("PRAGMA journal_mode=WAL")
        finally:
            cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(connection):
        mode = connection.get_execution_options().get("begin_mode")
        connection.exec_driver_sql(f"BEGIN {mode}" if mode else "BEGIN")
