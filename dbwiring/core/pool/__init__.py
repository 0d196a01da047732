"""
Data source provider: driver-level connect plus a SQLAlchemy pool per handle.

The DB-API drivers (sqlite3, psycopg, pymysql) are located by module name;
ConnectionConfig (driver, url, credentials, pool bounds) is enough.
"""

from .connect import connect, cursor_to_rows, execute, resolve_driver, rowcount
from .health import health_check
from .manager import (
    DataSource,
    create_data_source,
    dispose_data_source,
    get_data_source,
)

__all__ = [
    "connect",
    "execute",
    "cursor_to_rows",
    "resolve_driver",
    "rowcount",
    "health_check",
    "DataSource",
    "create_data_source",
    "dispose_data_source",
    "get_data_source",
]
