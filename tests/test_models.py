"""Unit tests for ConnectionConfig and Row."""

import pytest
from pydantic import ValidationError

from dbwiring.core.errors import RowMappingError
from dbwiring.models import (
    DEFAULT_URL,
    ConnectionConfig,
    DataSourceKindEnum,
    Row,
    infer_driver,
)


def test_connection_config_defaults() -> None:
    config = ConnectionConfig()
    assert config.kind == DataSourceKindEnum.POOLED
    assert config.url == DEFAULT_URL
    assert config.driver == "sqlite3"
    assert config.password == ""
    assert config.idle_timeout_ms is None


def test_connection_config_is_frozen() -> None:
    config = ConnectionConfig()
    with pytest.raises(ValidationError):
        config.url = "sqlite://"  # type: ignore[misc]


@pytest.mark.parametrize(
    ("url", "driver"),
    [
        ("sqlite://", "sqlite3"),
        ("sqlite+pysqlite:///tmp/x.db", "sqlite3"),
        ("postgresql://u:p@localhost:5432/app", "psycopg"),
        ("postgres://u@db/app", "psycopg"),
        ("postgresql+psycopg://u@db/app", "psycopg"),
        ("mysql://u@db/app", "pymysql"),
        ("mysql+pymysql://u@db/app", "pymysql"),
    ],
)
def test_infer_driver(url: str, driver: str) -> None:
    assert infer_driver(url) == driver
    assert ConnectionConfig(url=url).driver == driver


def test_explicit_driver_wins() -> None:
    config = ConnectionConfig(url="sqlite://", driver="pymysql")
    assert config.driver == "pymysql"


def test_unknown_backend_rejected() -> None:
    with pytest.raises(ValidationError, match="Cannot infer a driver"):
        ConnectionConfig(url="oracle://u@db/app")


def test_invalid_url_rejected() -> None:
    with pytest.raises(ValidationError, match="Invalid database URL"):
        ConnectionConfig(url="not a url")


def test_pool_bounds_validated() -> None:
    with pytest.raises(ValidationError):
        ConnectionConfig(max_active=0)
    with pytest.raises(ValidationError):
        ConnectionConfig(idle_timeout_ms=0)
    with pytest.raises(ValidationError, match="initial_size"):
        ConnectionConfig(max_active=2, initial_size=3)


def test_safe_url_masks_password() -> None:
    config = ConnectionConfig(url="postgresql://app:secret@db:5432/app")
    assert "secret" not in config.safe_url
    assert "secret" not in repr(ConnectionConfig(password="secret"))


class TestRow:
    def test_mapping_in_column_order(self) -> None:
        row = Row(["name", "department"], ("Paul", "HR"))
        assert row.columns == ("name", "department")
        assert list(row) == ["name", "department"]
        assert dict(row) == {"name": "Paul", "department": "HR"}
        assert len(row) == 2

    def test_case_insensitive_fallback(self) -> None:
        row = Row(["NAME"], ("Paul",))
        assert row["name"] == "Paul"
        assert row["NAME"] == "Paul"

    def test_missing_column_raises_row_mapping_error(self) -> None:
        row = Row(["name"], ("Paul",))
        with pytest.raises(RowMappingError) as exc_info:
            row["department"]
        assert exc_info.value.column == "department"
        assert "department" in str(exc_info.value)
        assert "name" in str(exc_info.value)

    def test_missing_column_is_key_error(self) -> None:
        row = Row(["name"], ("Paul",))
        assert row.get("department") is None
        assert "department" not in row
        with pytest.raises(KeyError):
            row["department"]

    def test_duplicate_label_last_value_wins(self) -> None:
        row = Row(["name", "department", "name"], ("Paul", "HR", "Anna"))
        assert row["name"] == "Anna"
        assert row.columns == ("name", "department")
        assert len(row) == len(row.columns) == 2

    def test_length_mismatch(self) -> None:
        with pytest.raises(ValueError):
            Row(["a", "b"], (1,))
