"""Tests for shared/repository.py."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

from shared.repository import BaseRepository, InMemoryRepository, parse_timestamp


class TestBaseRepository:
    def test_init_stores_db_client(self):
        """Should store the database client in _db attribute."""
        mock_db = MagicMock()
        repo = BaseRepository(mock_db)
        assert repo._db is mock_db

    def test_subclass_can_access_db(self):
        mock_db = MagicMock()
        mock_db.table.return_value.select.return_value.execute.return_value.data = [
            {"id": "123", "name": "test"}
        ]

        class TestRepository(BaseRepository[dict]):
            def get_all(self) -> list[dict]:
                return self._db.table("test").select("*").execute().data

        assert TestRepository(mock_db).get_all() == [{"id": "123", "name": "test"}]
        mock_db.table.assert_called_once_with("test")


class TestInMemoryRepository:
    def test_lock_is_reentrant(self):
        repo = InMemoryRepository()
        with repo._lock:
            with repo._lock:
                pass


class TestParseTimestamp:
    def test_none(self):
        assert parse_timestamp(None) is None

    def test_datetime_passthrough(self):
        now = datetime.now(timezone.utc)
        assert parse_timestamp(now) is now

    def test_zulu_suffix(self):
        parsed = parse_timestamp("2024-01-02T03:04:05Z")
        assert parsed == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    def test_offset(self):
        parsed = parse_timestamp("2024-01-02T03:04:05.123456+00:00")
        assert parsed.tzinfo is not None
        assert parsed.microsecond == 123456
