"""Tests for the EmployeeDao / DualDao startup scenario."""

import io

import pytest

from dbwiring.core.errors import StatementError
from dbwiring.core.pool import DataSource
from dbwiring.dao import DualDao, EmployeeDao
from dbwiring.engines.sql import query_scalar


def test_do_query_prints_inserted_employee(
    data_source: DataSource, capsys: pytest.CaptureFixture[str]
) -> None:
    EmployeeDao(data_source).do_query()
    out = capsys.readouterr().out
    assert out.splitlines() == ["Name = [Paul], Dept = [HR]"]


def test_print_all_lists_every_row(data_source: DataSource) -> None:
    dao = EmployeeDao(data_source)
    dao.add(1, "Ann", "IT")
    dao.insert_sample()
    stream = io.StringIO()

    assert dao.print_all(stream) == 2

    lines = stream.getvalue().splitlines()
    assert sorted(lines) == ["Name = [Ann], Dept = [IT]", "Name = [Paul], Dept = [HR]"]


def test_insert_sample_twice_violates_primary_key(data_source: DataSource) -> None:
    dao = EmployeeDao(data_source)
    assert dao.insert_sample() == 1
    with pytest.raises(StatementError):
        dao.insert_sample()
    assert query_scalar(data_source, "select count(*) from employee") == 1


def test_dual_ping(data_source: DataSource) -> None:
    assert DualDao(data_source).ping() == 1


def test_dual_do_query_prints_result(data_source: DataSource) -> None:
    stream = io.StringIO()
    DualDao(data_source).do_query(stream)
    assert stream.getvalue() == "result = 1\n"
