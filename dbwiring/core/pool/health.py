"""
Connection health check for a DataSource.
"""

import logging

from .connect import execute
from .manager import DataSource

logger = logging.getLogger(__name__)


def health_check(data_source: DataSource) -> bool:
    """
    Run SELECT 1 on a checked-out connection and return True if no exception.
    SQLite, Postgres and MySQL all support SELECT 1.
    """
    try:
        with data_source.connection() as conn:
            cur = execute(conn, "SELECT 1")
            try:
                cur.fetchone()
            finally:
                cur.close()
        return True
    except Exception:
        logger.warning("Health check failed for %s", data_source, exc_info=True)
        return False
