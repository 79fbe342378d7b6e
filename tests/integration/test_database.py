"""
Тесты для модуля database (engine, пул соединений и схема)
"""
import asyncio

import pytest
import pytest_asyncio
from sqlalchemy import exc as sa_exc
from sqlalchemy import text

from puntodeagua.core.exceptions import StorageError
from puntodeagua.database import Database, create_engine
from puntodeagua.database.schema import metadata
from puntodeagua.repositories import AccountRepository


@pytest_asyncio.fixture
async def small_engine(tmp_path):
    """Engine с пулом на одно соединение и коротким таймаутом"""
    engine = create_engine(str(tmp_path / "pool.db"), pool_size=1, connect_timeout=0.05)
    async with engine.begin() as connection:
        await connection.run_sync(metadata.create_all)
    yield engine
    await engine.dispose()


class TestEngine:
    """Тесты для create_engine и пула соединений"""

    def test_pool_settings(self, tmp_path):
        engine = create_engine(str(tmp_path / "pool.db"), pool_size=3, connect_timeout=2.5)

        pool = engine.sync_engine.pool
        assert pool.size() == 3
        assert pool.timeout() == 2.5

    def test_invalid_size(self, tmp_path):
        with pytest.raises(ValueError):
            create_engine(str(tmp_path / "pool.db"), pool_size=0)

    @pytest.mark.asyncio
    async def test_wal_journal(self, small_engine):
        async with small_engine.connect() as connection:
            result = await connection.exec_driver_sql("PRAGMA journal_mode")
            assert result.scalar().lower() == "wal"

    @pytest.mark.asyncio
    async def test_exhaustion_is_transient_storage_error(self, small_engine):
        """Исчерпание пула - StorageError(transient), а не зависание"""
        repo = AccountRepository(small_engine)

        async with repo.connection():
            with pytest.raises(StorageError) as exc_info:
                await repo.get_by_id(1)
        assert exc_info.value.transient is True

        # После освобождения соединение снова доступно
        assert await repo.get_by_id(1) is None

    @pytest.mark.asyncio
    async def test_connection_released_on_error(self, small_engine):
        repo = AccountRepository(small_engine)

        with pytest.raises(RuntimeError):
            async with repo.transaction():
                raise RuntimeError("boom")

        assert small_engine.sync_engine.pool.checkedout() == 0
        assert await repo.get_by_id(1) is None

    @pytest.mark.asyncio
    async def test_rollback_on_error(self, small_engine):
        repo = AccountRepository(small_engine)

        with pytest.raises(RuntimeError):
            async with repo.transaction() as connection:
                await connection.execute(
                    text(
                        "INSERT INTO accounts (email, password_hash, first_name, created_at, updated_at) "
                        "VALUES ('a@b.c', 'h', 'Ana', 'x', 'x')"
                    )
                )
                raise RuntimeError("boom")

        assert await repo.get_by_email("a@b.c") is None

    @pytest.mark.asyncio
    async def test_concurrent_checkouts_do_not_hang(self, tmp_path):
        engine = create_engine(str(tmp_path / "pool.db"), pool_size=2, connect_timeout=5)
        try:
            async with engine.begin() as connection:
                await connection.run_sync(metadata.create_all)
            repo = AccountRepository(engine)

            created = await asyncio.wait_for(
                asyncio.gather(
                    *(
                        repo.create(email=f"user{i}@example.com", password_hash="h", first_name="U")
                        for i in range(8)
                    )
                ),
                timeout=10,
            )
            found = await asyncio.wait_for(
                asyncio.gather(*(repo.get_by_id(account.id) for account in created)),
                timeout=10,
            )

            assert len({account.id for account in created}) == 8
            assert all(account is not None for account in found)
            assert engine.sync_engine.pool.checkedout() == 0
        finally:
            await engine.dispose()


class TestDatabase:
    """Тесты для класса Database"""

    @pytest.mark.asyncio
    async def test_init_db_is_idempotent(self, db: Database):
        await db.init_db()

        async with db.engine.connect() as connection:
            result = await connection.execute(
                text("SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name")
            )
            tables = set(result.scalars().all())

        assert {"accounts", "orders", "order_status_history"} <= tables

    @pytest.mark.asyncio
    async def test_in_memory_database(self, sink, order_data):
        database = Database(":memory:", notification_sink=sink)
        await database.connect()
        try:
            await database.init_db()
            order = await database.services.order_service.place(order_data)

            stored = await database.services.order_service.get_order(order.id)
            assert stored.id == order.id
        finally:
            await database.disconnect()

        assert sink.messages
        assert sink.closed is True
        assert database.engine is None

    def test_services_require_connection(self, tmp_path):
        database = Database(str(tmp_path / "test.db"))

        with pytest.raises(RuntimeError):
            database.services

    @pytest.mark.asyncio
    async def test_quantities_must_be_non_negative(self, db: Database):
        """CHECK constraint в схеме"""
        with pytest.raises(sa_exc.IntegrityError):
            async with db.engine.begin() as connection:
                await connection.execute(
                    text(
                        """
                        INSERT INTO orders (account_id, customer_name, delivery_address,
                                            bottles_18l, payment_method, total_cost, status,
                                            created_at, updated_at)
                        VALUES (1, 'x', 'y', -1, 'cash', 1.0, 'pending', 'a', 'a')
                        """
                    )
                )
