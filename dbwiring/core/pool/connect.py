"""
Physical DB connections from a ConnectionConfig.

The driver is a DB-API module located by name (sqlite3, psycopg, pymysql),
the way a JDBC URL names a driver class. Failures surface as
DataSourceConnectionError with the driver's own exception as __cause__.
"""

import importlib
import uuid
from collections.abc import Iterator
from types import ModuleType
from typing import Any
from urllib.parse import urlencode

from sqlalchemy.engine import URL, make_url

from dbwiring.core.errors import DataSourceConnectionError
from dbwiring.models import ConnectionConfig, Row

SUPPORTED_DRIVERS = ("sqlite3", "psycopg", "pymysql")

_FETCH_BATCH = 100


def resolve_driver(config: ConnectionConfig) -> ModuleType:
    """Import the DB-API module named by config.driver."""
    name = config.driver
    if name not in SUPPORTED_DRIVERS:
        raise DataSourceConnectionError(
            f"Unsupported driver: {name!r} (expected one of {', '.join(SUPPORTED_DRIVERS)})"
        )
    try:
        return importlib.import_module(name)
    except ImportError as e:
        raise DataSourceConnectionError(
            f"Driver {name!r} cannot be located; is it installed?"
        ) from e


def is_memory_database(config: ConnectionConfig) -> bool:
    """True for SQLite in-memory URLs (private or named shared-cache)."""
    if config.driver != "sqlite3":
        return False
    url = make_url(config.url)
    return url.database in (None, "", ":memory:") or url.query.get("mode") == "memory"


def share_memory_database(config: ConnectionConfig) -> ConnectionConfig:
    """Give a private SQLite ``:memory:`` URL a unique shared-cache name.

    A private in-memory database exists per connection; naming it lets every
    connection of one data source see the same tables.
    """
    url = make_url(config.url)
    if config.driver != "sqlite3" or url.database not in (None, "", ":memory:"):
        return config
    shared = url.set(
        database=f"file:dbwiring-{uuid.uuid4().hex}",
        query={"mode": "memory", "cache": "shared", "uri": "true"},
    )
    return config.model_copy(update={"url": shared.render_as_string(hide_password=False)})


def _sqlite_target(url: URL) -> tuple[str, bool]:
    """Return (database, uri) arguments for sqlite3.connect."""
    database = url.database or ":memory:"
    uri = str(url.query.get("uri", "")).lower() in ("true", "1")
    if uri:
        extra = {k: v for k, v in url.query.items() if k != "uri"}
        if extra:
            database = f"{database}?{urlencode(extra, doseq=True)}"
    return database, uri


def connect(config: ConnectionConfig, *, driver: ModuleType | None = None) -> Any:
    """
    Open one physical connection described by *config*.

    - username/password from the config win over those embedded in the URL.
    - SQLite connections are opened with check_same_thread=False so a pool
      may hand them to another thread.
    - connect_timeout is the server connect timeout for psycopg and pymysql.
      sqlite3 opens files without waiting, so there it becomes the busy
      timeout: how long a statement waits on another connection's lock.
    """
    driver = driver or resolve_driver(config)
    url = make_url(config.url)
    username = config.username or url.username or ""
    password = config.password or url.password or ""
    timeout = config.connect_timeout

    try:
        if config.driver == "sqlite3":
            database, uri = _sqlite_target(url)
            return driver.connect(
                database, uri=uri, timeout=timeout, check_same_thread=False
            )
        if config.driver == "psycopg":
            return driver.connect(
                host=url.host or "localhost",
                port=int(url.port or 5432),
                dbname=url.database,
                user=username,
                password=password,
                connect_timeout=timeout,
            )
        if config.driver == "pymysql":
            return driver.connect(
                host=url.host or "localhost",
                port=int(url.port or 3306),
                database=url.database,
                user=username,
                password=password,
                connect_timeout=timeout,
            )
    except (driver.Error, OSError) as e:
        raise DataSourceConnectionError(
            f"Cannot connect to {config.safe_url}: {e}"
        ) from e
    raise DataSourceConnectionError(f"Unsupported driver: {config.driver!r}")


def execute(conn: Any, sql: str, params: Any = None) -> Any:
    """
    Execute SQL and return the open cursor. Caller reads rows or rowcount and
    closes it.
    """
    cur = conn.cursor()
    try:
        if params is not None:
            cur.execute(sql, params)
        else:
            cur.execute(sql)
    except BaseException:
        cur.close()
        raise
    return cur


def cursor_to_rows(cursor: Any) -> Iterator[Row]:
    """Yield the cursor's result set as Rows, fetching in batches."""
    desc = cursor.description
    if not desc:
        return
    names = [d[0] for d in desc]
    while True:
        batch = cursor.fetchmany(_FETCH_BATCH)
        if not batch:
            return
        for values in batch:
            yield Row(names, values)


def rowcount(cursor: Any) -> int:
    """DB-API rowcount, with -1/None (not applicable) reported as 0."""
    rc = cursor.rowcount
    return rc if rc is not None and rc >= 0 else 0
