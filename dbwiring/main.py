"""
Startup routine: build the data source, hand it to the DAOs, run them once.

Wiring is explicit and ordered; errors are not caught, so a failure ends the
process with a traceback and a non-zero exit status.
"""

import logging

from dbwiring.core.config import settings
from dbwiring.core.pool import create_data_source
from dbwiring.dao import DualDao, EmployeeDao
from dbwiring.initial_data import init_schema

logger = logging.getLogger(__name__)


def main() -> None:
    logging.basicConfig(level=settings.LOG_LEVEL)
    config = settings.connection_config()
    logger.info("Starting %s (%s data source)", settings.PROJECT_NAME, config.kind.value)
    with create_data_source(config) as data_source:
        if settings.DB_INIT_SCHEMA:
            init_schema(data_source)
        employee_dao = EmployeeDao(data_source)
        dual_dao = DualDao(data_source)
        employee_dao.do_query()
        dual_dao.do_query()
    logger.info("Done")


if __name__ == "__main__":
    main()
