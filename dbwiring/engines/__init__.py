"""
Engines: SQL accessor over a DataSource.
"""

from dbwiring.engines.sql import query, query_scalar, update

__all__ = [
    "update",
    "query",
    "query_scalar",
]
