import pytest
from _pytest.fixtures import SubRequest
from sqlalchemy.engine import Engine

from entity_orm.config import Settings, create_engine


@pytest.fixture()
def engine(request: SubRequest) -> Engine:
    connection_url = request.config.getoption("--sqlalchemy-url") or "sqlite://"
    return create_engine(Settings(database_url=connection_url))
