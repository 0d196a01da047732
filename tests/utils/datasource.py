"""Test helpers for DataSource."""

import uuid

from dbwiring.models import ConnectionConfig


def random_memory_url() -> str:
    """Named shared-cache in-memory SQLite URL, unique per call."""
    return f"sqlite:///file:test-{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true"


def memory_config(**overrides: object) -> ConnectionConfig:
    """ConnectionConfig for a fresh in-memory database; keyword args override fields."""
    return ConnectionConfig(url=random_memory_url(), username="sa", **overrides)


def count_rows(conn: object, table: str) -> int:
    cur = conn.cursor()  # type: ignore[attr-defined]
    try:
        cur.execute(f"select count(*) from {table}")
        return int(cur.fetchone()[0])
    finally:
        cur.close()
