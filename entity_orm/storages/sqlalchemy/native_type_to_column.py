import typing
from datetime import date, datetime, time
from decimal import Decimal

from sqlalchemy import (
    CHAR,
    JSON,
    REAL,
    BigInteger,
    Boolean,
    Date,
    DateTime,
    Double,
    Integer,
    LargeBinary,
    Numeric,
    SmallInteger,
    String,
    Time,
)
from sqlalchemy.dialects import mysql
from sqlalchemy.types import TypeDecorator, TypeEngine

from entity_orm import types
from entity_orm.errors import UnsupportedTypeError


class DecimalText(TypeDecorator):
    """Keeps decimals as text where NUMERIC would degrade them to floats."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value: typing.Any, dialect: typing.Any) -> typing.Optional[str]:
        return None if value is None else str(value)


# SQLite auto-increments only an INTEGER PRIMARY KEY
IDENTITY = BigInteger().with_variant(Integer(), "sqlite")

mapping = {
    str: String(255),
    types.Char: CHAR(1),
    types.TinyInt: SmallInteger().with_variant(mysql.TINYINT(), "mysql"),
    types.SmallInt: SmallInteger(),
    int: Integer(),
    types.BigInt: BigInteger(),
    types.Real: REAL(),
    float: Double(),
    bool: Boolean(),
    date: Date(),
    time: Time(),
    datetime: DateTime(),
    types.AwareDatetime: DateTime(timezone=True),
    bytes: LargeBinary(),
    Decimal: Numeric().with_variant(DecimalText(), "sqlite"),
    types.Struct: JSON(),
}


def convert(arg: typing.Any) -> TypeEngine:
    try:
        return mapping[arg]
    except (KeyError, TypeError):
        raise UnsupportedTypeError(f"Unsupported type - {arg}", details={"type": arg})
