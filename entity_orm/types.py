import typing
from datetime import date, datetime, timezone
from decimal import Decimal
from functools import singledispatch

from entity_orm.entity import Entity, identity_of

# Semantic types without a native Python counterpart.
Char = typing.NewType("Char", str)
TinyInt = typing.NewType("TinyInt", int)
SmallInt = typing.NewType("SmallInt", int)
BigInt = typing.NewType("BigInt", int)
Real = typing.NewType("Real", float)
AwareDatetime = typing.NewType("AwareDatetime", datetime)
Struct = typing.NewType("Struct", dict)


@singledispatch
def to_storage(argument: typing.Any) -> typing.Any:
    return argument


@to_storage.register(Entity)
def _(argument: Entity) -> typing.Optional[int]:
    # related entity is stored as its identifier, None while transient
    return identity_of(argument)


@to_storage.register(datetime)
def _(argument: datetime) -> datetime:
    # aware moments are kept in UTC, stores without zone support drop the offset
    if argument.tzinfo is not None:
        return argument.astimezone(timezone.utc)
    return argument


def _to_date(value: typing.Any) -> typing.Any:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        return date.fromisoformat(value)
    return value


def _to_aware(value: typing.Any) -> typing.Any:
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _to_bytes(value: typing.Any) -> typing.Any:
    if isinstance(value, (memoryview, bytearray)):
        return bytes(value)
    return value


def _to_decimal(value: typing.Any) -> typing.Any:
    if isinstance(value, (float, int, str)) and not isinstance(value, bool):
        return Decimal(str(value))
    return value


def _to_bool(value: typing.Any) -> typing.Any:
    if isinstance(value, int) and not isinstance(value, bool):
        return bool(value)
    return value


mapping = {
    date: _to_date,
    AwareDatetime: _to_aware,
    bytes: _to_bytes,
    Decimal: _to_decimal,
    bool: _to_bool,
}


def from_storage(argument: typing.Any, field_type: typing.Any) -> typing.Any:
    if argument is None:
        return None

    try:
        return mapping[field_type](argument)
    except KeyError:
        return argument
