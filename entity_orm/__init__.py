from entity_orm.entity import Entity, Identity, many_to_one, one_to_many
from entity_orm.errors import (
    ConfigurationError,
    DuplicateError,
    HydrationError,
    NotFoundError,
    OrmError,
    StatementError,
    UnsupportedTypeError,
)
from entity_orm.manager import OrmManager
from entity_orm.registry import Registry
from entity_orm.types import AwareDatetime, BigInt, Char, Real, SmallInt, Struct, TinyInt

__all__ = [
    "AwareDatetime",
    "BigInt",
    "Char",
    "ConfigurationError",
    "DuplicateError",
    "Entity",
    "HydrationError",
    "Identity",
    "NotFoundError",
    "OrmError",
    "OrmManager",
    "Real",
    "Registry",
    "SmallInt",
    "StatementError",
    "Struct",
    "TinyInt",
    "UnsupportedTypeError",
    "many_to_one",
    "one_to_many",
]
