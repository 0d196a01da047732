"""Schema bootstrap: the employee table, plus a one-row `dual` where the database lacks one."""

import logging

from dbwiring.core.pool import DataSource
from dbwiring.engines.sql import run_script

logger = logging.getLogger(__name__)

EMPLOYEE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS employee (
    id INTEGER PRIMARY KEY,
    name VARCHAR(100),
    department VARCHAR(100)
)
"""

# MySQL has DUAL built in.
DUAL_VIEW_SQL = {
    "sqlite3": "CREATE VIEW IF NOT EXISTS dual AS SELECT 'X' AS dummy",
    "psycopg": "CREATE OR REPLACE VIEW dual AS SELECT 'X'::varchar AS dummy",
}


def schema_script(driver: str) -> str:
    statements = [EMPLOYEE_TABLE_SQL.strip()]
    if driver in DUAL_VIEW_SQL:
        statements.append(DUAL_VIEW_SQL[driver])
    return ";\n".join(statements) + ";\n"


def init_schema(data_source: DataSource) -> None:
    logger.info("Creating schema on %s", data_source)
    run_script(data_source, schema_script(data_source.config.driver))
    logger.info("Schema created")
