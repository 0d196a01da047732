"""
SQL accessor: plain SQL text against a DataSource, rows handed to callbacks.
"""

from dbwiring.engines.sql.executor import (
    iter_rows,
    placeholder,
    query,
    query_for_list,
    query_scalar,
    run_script,
    split_statements,
    update,
)

__all__ = [
    "update",
    "query",
    "iter_rows",
    "query_for_list",
    "query_scalar",
    "run_script",
    "split_statements",
    "placeholder",
]
