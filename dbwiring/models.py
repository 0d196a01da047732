"""
Connection configuration and result rows.

ConnectionConfig is the immutable input of the data source provider; Row is
what the accessor hands to row callbacks.
"""

from collections.abc import Iterator, Mapping, Sequence
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from dbwiring.core.errors import RowMappingError

# Named in-memory database shared by every connection of the process.
DEFAULT_URL = "sqlite:///file:mydb?mode=memory&cache=shared&uri=true"

# URL backend name -> DB-API module
_BACKEND_DRIVERS = {
    "sqlite": "sqlite3",
    "postgresql": "psycopg",
    "postgres": "psycopg",
    "mysql": "pymysql",
}

# Explicit "+driver" URL suffix -> DB-API module
_URL_DRIVERS = {
    "pysqlite": "sqlite3",
    "psycopg": "psycopg",
    "pymysql": "pymysql",
}


class DataSourceKindEnum(str, Enum):
    """How the provider hands out connections."""

    POOLED = "pooled"  # bounded pool, connections reused
    SINGLE = "single"  # one shared connection, never closed between uses
    DRIVER_MANAGER = "driver_manager"  # new physical connection per checkout


def infer_driver(url: str) -> str:
    """Return the DB-API module name for a SQLAlchemy-style URL."""
    try:
        parsed = make_url(url)
    except ArgumentError as e:
        raise ValueError(f"Invalid database URL: {url!r}") from e
    if "+" in parsed.drivername:
        name = parsed.get_driver_name()
        return _URL_DRIVERS.get(name, name)
    backend = parsed.get_backend_name()
    if backend not in _BACKEND_DRIVERS:
        raise ValueError(f"Cannot infer a driver for backend {backend!r}")
    return _BACKEND_DRIVERS[backend]


class ConnectionConfig(BaseModel):
    """Everything needed to build a data source. Frozen once constructed."""

    model_config = ConfigDict(frozen=True)

    kind: DataSourceKindEnum = DataSourceKindEnum.POOLED
    driver: str = Field(
        default="",
        description="DB-API module name (sqlite3, psycopg, pymysql). Inferred from url when empty.",
    )
    url: str = Field(default=DEFAULT_URL, min_length=1)
    username: str = Field(default="", max_length=255)
    password: str = Field(default="", max_length=512, repr=False)
    max_active: int = Field(default=8, ge=1)
    idle_timeout_ms: int | None = Field(default=None, ge=1)
    max_wait_ms: int = Field(default=30000, ge=0)
    initial_size: int = Field(default=1, ge=0)
    connect_timeout: int = Field(default=10, ge=1)

    @model_validator(mode="before")
    @classmethod
    def _fill_driver(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("driver"):
            data = {**data, "driver": infer_driver(data.get("url") or DEFAULT_URL)}
        return data

    @model_validator(mode="after")
    def _check_pool_bounds(self) -> "ConnectionConfig":
        if self.initial_size > self.max_active:
            raise ValueError(
                f"initial_size ({self.initial_size}) must not exceed max_active ({self.max_active})"
            )
        return self

    @property
    def safe_url(self) -> str:
        """URL with any password masked, for logs and error messages."""
        return make_url(self.url).render_as_string(hide_password=True)


class Row(Mapping[str, Any]):
    """One result record: column name -> value, in result-set column order.

    Lookup is exact first, then case-insensitive (drivers differ in how they
    fold unquoted identifiers). A missing column raises RowMappingError.
    When a result repeats a column label, the last value wins and the label
    appears once in ``columns``, at its first position.
    """

    __slots__ = ("_columns", "_values", "_folded")

    def __init__(self, columns: Sequence[str], values: Sequence[Any]) -> None:
        self._values = dict(zip(columns, values, strict=True))
        self._columns = tuple(self._values)
        self._folded = {c.lower(): c for c in self._columns}

    @property
    def columns(self) -> tuple[str, ...]:
        return self._columns

    def __getitem__(self, column: str) -> Any:
        if column in self._values:
            return self._values[column]
        folded = self._folded.get(column.lower()) if isinstance(column, str) else None
        if folded is None:
            raise RowMappingError(column, self._columns)
        return self._values[folded]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Row({self._values!r})"
