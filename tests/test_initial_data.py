"""Tests for schema bootstrap."""

from dbwiring.core.pool import DataSource, create_data_source
from dbwiring.engines.sql import query_for_list, query_scalar
from dbwiring.initial_data import init_schema, schema_script
from tests.utils.datasource import memory_config


def test_init_schema_is_repeatable(pooled_data_source: DataSource) -> None:
    init_schema(pooled_data_source)
    assert query_scalar(pooled_data_source, "select count(*) from employee") == 0
    assert query_scalar(pooled_data_source, "select 1 from dual") == 1


def test_employee_columns() -> None:
    with create_data_source(memory_config()) as ds:
        init_schema(ds)
        ds_rows = query_for_list(ds, "select * from employee")
        assert ds_rows == []
        columns = [r["name"] for r in query_for_list(ds, "pragma table_info(employee)")]
        assert columns == ["id", "name", "department"]


def test_schema_script_per_driver() -> None:
    assert "VIEW IF NOT EXISTS dual" in schema_script("sqlite3")
    assert "OR REPLACE VIEW dual" in schema_script("psycopg")
    assert "dual" not in schema_script("pymysql")
    assert schema_script("pymysql").count(";") == 1
