"""
Data source provider: builds a connection handle from a ConnectionConfig.

Pooling itself belongs to SQLAlchemy's pool classes; this module only picks
one per DataSourceKindEnum and wires our driver-level connect() in as its
creator:

- POOLED          -> QueuePool (max_active, max_wait_ms, idle_timeout_ms as recycle)
- SINGLE          -> StaticPool (one connection, reused)
- DRIVER_MANAGER  -> NullPool (connect on checkout, close on release)

No locking is done here: a DataSource may be shared across threads only as
far as the chosen pool and driver allow. QueuePool and NullPool are
thread-safe; StaticPool hands the same connection to every caller.
"""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import event
from sqlalchemy import exc as sa_exc
from sqlalchemy.pool import NullPool, Pool, QueuePool, StaticPool

from dbwiring.core.config import settings
from dbwiring.core.errors import DataSourceConnectionError
from dbwiring.models import ConnectionConfig, DataSourceKindEnum

from .connect import connect, is_memory_database, resolve_driver, share_memory_database

logger = logging.getLogger(__name__)


def _build_pool(config: ConnectionConfig, creator: Any) -> Pool:
    if config.kind == DataSourceKindEnum.POOLED:
        recycle = config.idle_timeout_ms / 1000 if config.idle_timeout_ms else -1
        return QueuePool(
            creator,
            pool_size=config.max_active,
            max_overflow=0,
            timeout=config.max_wait_ms / 1000,
            recycle=recycle,
        )
    if config.kind == DataSourceKindEnum.SINGLE:
        return StaticPool(creator)
    return NullPool(creator)


class DataSource:
    """Connection handle: one or a pool of live connections to one database."""

    def __init__(self, config: ConnectionConfig) -> None:
        self.driver = resolve_driver(config)
        self.config = share_memory_database(config)
        self._lock = threading.Lock()
        self._checked_out = 0
        self._connects = 0
        self._disposed = False
        # In-memory SQLite lives only while some connection is open.
        self._anchor: Any = None
        if is_memory_database(self.config):
            self._anchor = connect(self.config, driver=self.driver)

        self._pool = _build_pool(self.config, self._create)
        event.listen(self._pool, "connect", self._on_connect)
        event.listen(self._pool, "checkout", self._on_checkout)
        event.listen(self._pool, "checkin", self._on_checkin)

        try:
            self._open_initial()
        except Exception:
            self.dispose()
            raise
        logger.info("Created %s", self)

    def __repr__(self) -> str:
        return f"DataSource(kind={self.config.kind.value}, url={self.config.safe_url})"

    def __enter__(self) -> "DataSource":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.dispose()

    # ------------------------------------------------------------------
    # Checkout / release
    # ------------------------------------------------------------------

    def get_connection(self) -> Any:
        """Check out a connection. Return it with release() (or conn.close())."""
        if self._disposed:
            raise DataSourceConnectionError(f"{self!r} has been disposed")
        try:
            return self._pool.connect()
        except sa_exc.TimeoutError as e:
            raise DataSourceConnectionError(
                f"No connection available within {self.config.max_wait_ms} ms "
                f"(max_active={self.config.max_active})"
            ) from e

    def release(self, conn: Any) -> None:
        """Return a connection to the pool; pending work is rolled back."""
        conn.close()

    @contextmanager
    def connection(self) -> Iterator[Any]:
        """Checked-out connection: commit on success, rollback on error, always released."""
        conn = self.get_connection()
        try:
            yield conn
            conn.commit()
        except Exception:
            try:
                conn.rollback()
            except Exception:
                logger.debug("Rollback failed on %s", self, exc_info=True)
            raise
        finally:
            self.release(conn)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def dispose(self) -> None:
        """Close pooled connections. Safe to call more than once."""
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
        self._pool.dispose()
        if self._anchor is not None:
            self._anchor.close()
            self._anchor = None
        logger.info("Disposed %s", self)

    @property
    def disposed(self) -> bool:
        return self._disposed

    def stats(self) -> dict[str, Any]:
        """Return pool statistics for monitoring."""
        with self._lock:
            checked_out = self._checked_out
            connects = self._connects
        if isinstance(self._pool, QueuePool):
            idle = self._pool.checkedin()
        elif isinstance(self._pool, StaticPool):
            idle = 1 if connects and not checked_out and not self._disposed else 0
        else:
            idle = 0
        return {
            "kind": self.config.kind.value,
            "max_active": self.config.max_active,
            "checked_out": checked_out,
            "idle": idle,
            "connects": connects,
            "disposed": self._disposed,
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _create(self) -> Any:
        return connect(self.config, driver=self.driver)

    def _open_initial(self) -> None:
        """Open connections eagerly so a bad URL fails here, not on first use."""
        if self.config.kind == DataSourceKindEnum.POOLED:
            count = self.config.initial_size
        elif self.config.kind == DataSourceKindEnum.SINGLE:
            count = 1
        else:
            return
        conns = []
        try:
            for _ in range(count):
                conns.append(self.get_connection())
        finally:
            for conn in conns:
                self.release(conn)

    def _on_connect(self, dbapi_connection: Any, connection_record: Any) -> None:
        with self._lock:
            self._connects += 1

    def _on_checkout(
        self, dbapi_connection: Any, connection_record: Any, connection_proxy: Any
    ) -> None:
        with self._lock:
            self._checked_out += 1

    def _on_checkin(self, dbapi_connection: Any, connection_record: Any) -> None:
        with self._lock:
            self._checked_out -= 1


def create_data_source(config: ConnectionConfig) -> DataSource:
    """
    Build a DataSource for *config*.

    Raises DataSourceConnectionError when the driver cannot be located or,
    for POOLED/SINGLE, when the database rejects the URL or credentials.
    DRIVER_MANAGER defers connecting until first use.
    """
    return DataSource(config)


_data_source: DataSource | None = None
_data_source_lock = threading.Lock()


def get_data_source() -> DataSource:
    """Return the process-wide DataSource built from settings (thread-safe double-checked locking)."""
    global _data_source
    if _data_source is None or _data_source.disposed:
        with _data_source_lock:
            if _data_source is None or _data_source.disposed:
                _data_source = create_data_source(settings.connection_config())
    return _data_source


def dispose_data_source() -> None:
    """Dispose the process-wide DataSource, if one was created."""
    global _data_source
    with _data_source_lock:
        ds, _data_source = _data_source, None
    if ds is not None:
        ds.dispose()
