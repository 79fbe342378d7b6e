"""
Тесты для хэширования паролей
"""
from puntodeagua.utils.passwords import PasswordManager


class TestPasswordManager:
    """Тесты для PasswordManager"""

    def test_hash_is_salted_and_not_plaintext(self, password_manager):
        first = password_manager.hash("secreto123")
        second = password_manager.hash("secreto123")

        assert first != second
        assert "secreto123" not in first
        assert first.startswith("$argon2id$")

    def test_verify(self, password_manager):
        password_hash = password_manager.hash("secreto123")

        assert password_manager.verify(password_hash, "secreto123") is True
        assert password_manager.verify(password_hash, "otro") is False

    def test_verify_invalid_hash(self, password_manager):
        """Поврежденный хэш в БД - просто несовпадение"""
        assert password_manager.verify("not-a-hash", "secreto123") is False

    def test_bcrypt_hash_is_rejected(self, password_manager, caplog):
        """bcrypt-хэши не принимаются, в логе подсказка пересоздать пароль"""
        bcrypt_hash = "$2b$10$N9qo8uLOickgx2ZMRZoMyeIjZAgcfl7p92ldGxad68LJZdL17lhWy"

        with caplog.at_level("WARNING", logger="puntodeagua.utils.passwords"):
            assert password_manager.verify(bcrypt_hash, "secreto123") is False

        assert "bcrypt" in caplog.text
        assert password_manager.needs_rehash(bcrypt_hash) is True

    def test_needs_rehash_after_cost_change(self, password_manager):
        password_hash = password_manager.hash("secreto123")
        stronger = PasswordManager(time_cost=2, memory_cost=16, parallelism=1)

        assert password_manager.needs_rehash(password_hash) is False
        assert stronger.needs_rehash(password_hash) is True
