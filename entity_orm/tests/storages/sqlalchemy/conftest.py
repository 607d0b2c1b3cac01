from typing import Generator

import pytest
from sqlalchemy.engine import Connection, Engine

from entity_orm.storages.sqlalchemy import SqlAlchemyOrmManager


@pytest.fixture()
def connection(engine: Engine) -> Generator[Connection, None, None]:
    connection = engine.connect()
    yield connection
    connection.rollback()
    connection.close()
    engine.dispose()


@pytest.fixture()
def orm(connection: Connection) -> SqlAlchemyOrmManager:
    return SqlAlchemyOrmManager(connection)
