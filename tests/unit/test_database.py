"""Tests for the Database pool handle (oracledb patched)."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from lotterypay.core.config import Settings
from lotterypay.core.database import Database
from tests.conftest import MockPool


@pytest.fixture
def settings() -> Settings:
    return Settings(app_env="testing", oracle_password="oracle")


def test_acquire_before_open_raises(settings: Settings):
    with pytest.raises(RuntimeError, match="not open"):
        Database(settings).acquire()


def test_open_creates_pool_once(settings: Settings):
    with patch("lotterypay.core.database.oracledb.create_pool", return_value=MockPool()) as create:
        database = Database(settings)
        database.open()
        database.open()

    create.assert_called_once()
    assert create.call_args.kwargs["dsn"] == "localhost:1521/FREEPDB1"
    assert database.is_open


def test_ping_and_close(settings: Settings):
    pool = MockPool()
    with patch("lotterypay.core.database.oracledb.create_pool", return_value=pool):
        with Database(settings) as database:
            database.ping()
            assert pool._connection._cursor.last_sql == "SELECT 1 FROM DUAL"
        assert not database.is_open
