"""
Data-access objects used by the startup routine.

Each takes its DataSource in the constructor; nothing is injected or scanned.
"""

import logging
from typing import Any, TextIO

from dbwiring.core.pool import DataSource
from dbwiring.engines.sql import placeholder, query, query_scalar, update
from dbwiring.models import Row

logger = logging.getLogger(__name__)


class EmployeeDao:
    """Reads and writes the ``employee`` table."""

    INSERT_SAMPLE_SQL = "insert into employee values (2,'Paul','HR')"
    SELECT_ALL_SQL = "select name, department from employee"

    def __init__(self, data_source: DataSource) -> None:
        self.data_source = data_source

    def add(self, id: int, name: str, department: str) -> int:
        p = placeholder(self.data_source)
        sql = f"insert into employee (id, name, department) values ({p}, {p}, {p})"
        return update(self.data_source, sql, (id, name, department))

    def insert_sample(self) -> int:
        return update(self.data_source, self.INSERT_SAMPLE_SQL)

    def print_all(self, stream: TextIO | None = None) -> int:
        """Print one ``Name = [..], Dept = [..]`` line per employee; return the row count."""

        def print_row(row: Row) -> None:
            print(
                "Name = [%s], Dept = [%s]" % (row["name"], row["department"]),
                file=stream,
            )

        return query(self.data_source, self.SELECT_ALL_SQL, print_row)

    def do_query(self, stream: TextIO | None = None) -> None:
        self.insert_sample()
        count = self.print_all(stream)
        logger.info("Listed %d employee(s)", count)


class DualDao:
    """Liveness probe against the one-row ``dual`` table."""

    PING_SQL = "select 1 from dual"

    def __init__(self, data_source: DataSource) -> None:
        self.data_source = data_source

    def ping(self) -> Any:
        return query_scalar(self.data_source, self.PING_SQL)

    def do_query(self, stream: TextIO | None = None) -> None:
        print(f"result = {self.ping()}", file=stream)
