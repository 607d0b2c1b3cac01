import abc
import typing

import attr

from entity_orm.errors import ConfigurationError


class EntityWithoutIdentity(ConfigurationError):
    pass


class EntityWithMultipleIdentities(ConfigurationError):
    pass


class IdentityNotInteger(ConfigurationError):
    pass


T = typing.TypeVar("T")

MANY_TO_ONE = "entity_orm.many_to_one"
ONE_TO_MANY = "entity_orm.one_to_many"


class Identity(typing.Generic[T]):
    @classmethod
    def is_identity(cls, field_type: typing.Any) -> bool:
        return getattr(field_type, "__origin__", None) is cls


def many_to_one(column: typing.Optional[str] = None) -> typing.Any:
    """Declares the owning side of a relation.

    ``column`` names the foreign-key column; when omitted it is derived from the field name and the related
    identity, e.g. ``author`` -> ``author_id``.
    """
    return attr.ib(default=None, metadata={MANY_TO_ONE: column})


def one_to_many(mapped_by: str) -> typing.Any:
    """Declares the inverse side of a relation, reconstructed from the related table's ``mapped_by`` column."""
    # inverse side stays out of eq/repr, otherwise bidirectional graphs never terminate
    return attr.ib(factory=list, eq=False, repr=False, metadata={ONE_TO_MANY: mapped_by})


class EntityMeta(abc.ABCMeta):
    def __new__(mcs, name: str, bases: tuple, namespace: dict):
        cls = super().__new__(mcs, name, bases, namespace)
        if name == "Entity":
            return cls

        annotations = getattr(cls, "__annotations__", {})
        identities = [field_name for field_name, field_type in annotations.items() if Identity.is_identity(field_type)]
        if not identities:
            raise EntityWithoutIdentity(f"{name} does not declare an Identity field")
        if len(identities) > 1:
            raise EntityWithMultipleIdentities(f"{name} declares more than one Identity field: {identities}")

        identity_name = identities[0]
        if annotations[identity_name].__args__[0] is not int:
            raise IdentityNotInteger(f"{name}.{identity_name} must be Identity[int]")
        if identity_name not in namespace:
            # store generated, so it never takes a positional slot in the constructor
            setattr(cls, identity_name, attr.ib(default=None, kw_only=True))

        cls.__entity_identity__ = identity_name
        return attr.s(auto_attribs=True)(cls)


class Entity(metaclass=EntityMeta):
    pass


def identity_of(entity: Entity) -> typing.Optional[int]:
    return getattr(entity, type(entity).__entity_identity__)


def set_identity(entity: Entity, value: int) -> None:
    setattr(entity, type(entity).__entity_identity__, value)


def is_entity(candidate: typing.Any) -> bool:
    return isinstance(candidate, type) and issubclass(candidate, Entity) and candidate is not Entity
