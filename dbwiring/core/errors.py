"""
Data-access error taxonomy.

Driver exceptions are never swallowed: they are re-raised as one of these
types with the driver error attached as ``__cause__``.
"""

from __future__ import annotations


class DataAccessError(Exception):
    """Base class for every error raised by the data source or accessor."""

    pass


class DataSourceConnectionError(DataAccessError):
    """The driver cannot be located, or the database rejected the URL/credentials."""

    pass


class StatementError(DataAccessError):
    """A statement could not be prepared or was rejected by the database."""

    def __init__(self, message: str, *, sql: str | None = None) -> None:
        super().__init__(message)
        self.sql = sql


class IncorrectResultSizeError(StatementError):
    """A single-value query returned the wrong number of rows or columns."""

    def __init__(
        self, message: str, *, sql: str | None = None, expected: int, actual: int
    ) -> None:
        super().__init__(message, sql=sql)
        self.expected = expected
        self.actual = actual


class RowMappingError(DataAccessError, KeyError):
    """A requested column is absent from a result row.

    Also a ``KeyError`` so ``Mapping.get`` and ``in`` behave as usual.
    """

    def __init__(self, column: str, available: tuple[str, ...]) -> None:
        super().__init__(column)
        self.column = column
        self.available = available

    def __str__(self) -> str:
        return f"Column {self.column!r} not in row (columns: {', '.join(self.available)})"
