from collections.abc import Generator

import pytest

from dbwiring.core.pool import DataSource, create_data_source
from dbwiring.initial_data import init_schema
from dbwiring.models import DataSourceKindEnum
from tests.utils.datasource import memory_config


@pytest.fixture(params=list(DataSourceKindEnum), ids=lambda k: k.value)
def kind(request: pytest.FixtureRequest) -> DataSourceKindEnum:
    return request.param


@pytest.fixture
def data_source(kind: DataSourceKindEnum) -> Generator[DataSource, None, None]:
    """Schema-initialised in-memory data source, once per provider kind."""
    ds = create_data_source(memory_config(kind=kind))
    init_schema(ds)
    yield ds
    ds.dispose()


@pytest.fixture
def pooled_data_source() -> Generator[DataSource, None, None]:
    ds = create_data_source(memory_config(max_active=5, idle_timeout_ms=30000))
    init_schema(ds)
    yield ds
    ds.dispose()
