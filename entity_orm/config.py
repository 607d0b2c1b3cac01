import os
import typing

import attr
from sqlalchemy import create_engine as sa_create_engine
from sqlalchemy import event
from sqlalchemy.engine import Engine

DATABASE_URL_VARIABLE = "ENTITY_ORM_DATABASE_URL"
ECHO_VARIABLE = "ENTITY_ORM_ECHO"


def _to_bool(value: typing.Union[str, bool]) -> bool:
    if isinstance(value, bool):
        return value
    return value.strip().lower() in ("1", "true", "yes", "on")


@attr.s(auto_attribs=True, frozen=True)
class Settings:
    database_url: str = "sqlite://"
    echo: bool = attr.ib(default=False, converter=_to_bool)

    @classmethod
    def from_env(cls, environ: typing.Optional[typing.Mapping[str, str]] = None) -> "Settings":
        environ = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            database_url=environ.get(DATABASE_URL_VARIABLE, defaults.database_url),
            echo=environ.get(ECHO_VARIABLE, defaults.echo),
        )


def _enable_sqlite_foreign_keys(dbapi_connection: typing.Any, _connection_record: typing.Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(settings: typing.Optional[Settings] = None) -> Engine:
    settings = settings or Settings.from_env()
    engine = sa_create_engine(settings.database_url, echo=settings.echo)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine
