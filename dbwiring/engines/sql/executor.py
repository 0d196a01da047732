"""
Run SQL text against a DataSource.

- update: INSERT/UPDATE/DELETE, returns rows affected, commits
- query: calls row_callback(row) once per row, in result-set order
- iter_rows / query_for_list: the same rows as a lazy iterator or a list
- query_scalar: exactly one row with exactly one column
- run_script: ';'-separated statements in one transaction

Driver errors are re-raised as StatementError (driver error as __cause__).
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import closing, contextmanager
from typing import Any

from dbwiring.core.errors import IncorrectResultSizeError, StatementError
from dbwiring.core.pool import DataSource, cursor_to_rows, execute, rowcount
from dbwiring.models import Row

logger = logging.getLogger(__name__)

_PLACEHOLDERS = {"qmark": "?", "format": "%s", "pyformat": "%s"}


def placeholder(data_source: DataSource) -> str:
    """Positional bind marker for the data source's driver ('?' or '%s')."""
    style = data_source.driver.paramstyle
    if style not in _PLACEHOLDERS:
        raise StatementError(f"Unsupported paramstyle: {style!r}")
    return _PLACEHOLDERS[style]


@contextmanager
def _statement(data_source: DataSource, sql: str) -> Iterator[None]:
    try:
        yield
    except data_source.driver.Error as e:
        raise StatementError(f"Statement failed: {e}", sql=sql) from e


def update(data_source: DataSource, sql: str, params: Any = None) -> int:
    """Execute a DML statement, commit, and return the number of rows affected."""
    logger.debug("update: %s", sql)
    with _statement(data_source, sql), data_source.connection() as conn:
        cur = execute(conn, sql, params)
        try:
            return rowcount(cur)
        finally:
            cur.close()


def iter_rows(data_source: DataSource, sql: str, params: Any = None) -> Iterator[Row]:
    """
    Lazily yield result rows. Nothing runs until the first next(); the
    connection is held until the iterator is exhausted or closed.
    """
    logger.debug("query: %s", sql)
    with _statement(data_source, sql), data_source.connection() as conn:
        cur = execute(conn, sql, params)
        try:
            yield from cursor_to_rows(cur)
        finally:
            cur.close()


def query(
    data_source: DataSource,
    sql: str,
    row_callback: Callable[[Row], Any],
    params: Any = None,
) -> int:
    """Call row_callback once per result row and return how many rows were processed."""
    count = 0
    with closing(iter_rows(data_source, sql, params)) as rows:
        for row in rows:
            row_callback(row)
            count += 1
    return count


def query_for_list(data_source: DataSource, sql: str, params: Any = None) -> list[Row]:
    with closing(iter_rows(data_source, sql, params)) as rows:
        return list(rows)


def query_scalar(data_source: DataSource, sql: str, params: Any = None) -> Any:
    """Return the single value of a one-row, one-column result.

    A size mismatch raises inside the transaction, so any write made by the
    statement is rolled back.
    """
    logger.debug("query_scalar: %s", sql)
    with _statement(data_source, sql), data_source.connection() as conn:
        cur = execute(conn, sql, params)
        try:
            width = len(cur.description or ())
            rows = cur.fetchall() if width else []
        finally:
            cur.close()

        if width != 1:
            raise IncorrectResultSizeError(
                f"Expected 1 column, got {width}", sql=sql, expected=1, actual=width
            )
        if len(rows) != 1:
            raise IncorrectResultSizeError(
                f"Expected 1 row, got {len(rows)}", sql=sql, expected=1, actual=len(rows)
            )
        return rows[0][0]


def split_statements(sql: str) -> list[str]:
    """Split SQL into statements on ``;`` while respecting quotes and comments.

    Handles single-quoted (``'...'``), double-quoted (``"..."``), and
    dollar-quoted (``$$...$$``) literals plus ``--`` and ``/* */`` comments,
    so that semicolons inside them are not treated as terminators.
    """
    stmts: list[str] = []
    current: list[str] = []
    i = 0
    length = len(sql)

    while i < length:
        ch = sql[i]
        nxt = sql[i + 1] if i + 1 < length else ""

        if ch in ("'", '"'):
            end = i + 1
            while end < length:
                if sql[end] == ch:
                    if end + 1 < length and sql[end + 1] == ch:
                        end += 2
                        continue
                    break
                end += 2 if sql[end] == "\\" else 1
            current.append(sql[i : end + 1])
            i = end + 1
            continue

        if ch + nxt in ("$$", "--", "/*"):
            closer = {"$$": "$$", "--": "\n", "/*": "*/"}[ch + nxt]
            end = sql.find(closer, i + 2)
            end = length if end == -1 else end + len(closer)
            current.append(sql[i:end])
            i = end
            continue

        if ch == ";":
            stmt = "".join(current).strip()
            if stmt:
                stmts.append(stmt)
            current = []
        else:
            current.append(ch)
        i += 1

    tail = "".join(current).strip()
    if tail:
        stmts.append(tail)
    return stmts


def run_script(data_source: DataSource, script: str) -> list[int]:
    """Run every statement of *script* in order, in one transaction; return row counts."""
    results: list[int] = []
    with _statement(data_source, script), data_source.connection() as conn:
        for stmt in split_statements(script):
            logger.debug("script: %s", stmt)
            with _statement(data_source, stmt):
                cur = execute(conn, stmt)
                try:
                    results.append(rowcount(cur))
                finally:
                    cur.close()
    return results
