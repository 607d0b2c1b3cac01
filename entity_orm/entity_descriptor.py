import abc
import inspect
import typing

import attr
import inflection

from entity_orm.entity import MANY_TO_ONE, ONE_TO_MANY, Entity, Identity, is_entity
from entity_orm.errors import ConfigurationError


def _is_generic(field_type: typing.Any) -> bool:
    return hasattr(field_type, "__origin__")


def _get_wrapped_type(wrapped_type: typing.Any) -> typing.Any:
    return wrapped_type.__args__[0]


def _is_field_nullable(field_type: typing.Any) -> bool:
    return (
        _is_generic(field_type)
        and field_type.__origin__ is typing.Union
        and len(field_type.__args__) == 2
        and type(None) in field_type.__args__
    )


def _unwrap_nullable(field_type: typing.Any) -> typing.Any:
    return next(arg for arg in field_type.__args__ if arg is not type(None))


def _is_list(field_type: typing.Any) -> bool:
    return _is_generic(field_type) and field_type.__origin__ in (list, typing.List)


class Visitor:
    def traverse_from(self, descriptor: "EntityDescriptor") -> None:
        descriptor.accept(self)
        for field in descriptor.fields:
            field.accept(self)
        descriptor.farewell(self)

    def visit_entity(self, entity: "EntityDescriptor") -> None:
        pass

    def leave_entity(self, entity: "EntityDescriptor") -> None:
        pass

    def visit_identity(self, field: "IdentityField") -> None:
        pass

    def visit_column(self, field: "ColumnField") -> None:
        pass

    def visit_many_to_one(self, field: "ManyToOneField") -> None:
        pass

    def visit_one_to_many(self, field: "OneToManyField") -> None:
        pass


class FieldMeta(type):
    def __new__(mcs, name: str, bases: tuple, namespace: dict) -> typing.Type:
        cls = super().__new__(mcs, name, bases, namespace)
        if inspect.isabstract(cls):
            return cls
        return attr.s(auto_attribs=True, frozen=True)(cls)


class FieldDescriptor(metaclass=FieldMeta):
    name: str
    type: typing.Any
    nullable: bool = False

    @abc.abstractmethod
    def accept(self, visitor: Visitor) -> None:
        pass


class IdentityField(FieldDescriptor):
    def accept(self, visitor: Visitor) -> None:
        visitor.visit_identity(self)


class ColumnField(FieldDescriptor):
    def accept(self, visitor: Visitor) -> None:
        visitor.visit_column(self)


class ManyToOneField(FieldDescriptor):
    column: str = ""

    def accept(self, visitor: Visitor) -> None:
        visitor.visit_many_to_one(self)


class OneToManyField(FieldDescriptor):
    mapped_by: str = ""

    def accept(self, visitor: Visitor) -> None:
        visitor.visit_one_to_many(self)


@attr.s(auto_attribs=True, frozen=True)
class EntityDescriptor:
    type: typing.Type[Entity]
    table_name: str
    fields: typing.Tuple[FieldDescriptor, ...]

    def accept(self, visitor: Visitor) -> None:
        visitor.visit_entity(self)

    def farewell(self, visitor: Visitor) -> None:
        visitor.leave_entity(self)

    @property
    def identity(self) -> IdentityField:
        return next(field for field in self.fields if isinstance(field, IdentityField))

    def fields_of(self, role: typing.Type[FieldDescriptor]) -> typing.List[FieldDescriptor]:
        return [field for field in self.fields if isinstance(field, role)]

    @property
    def selectable_fields(self) -> typing.List[FieldDescriptor]:
        """Identity and plain columns, in declaration order."""
        return [field for field in self.fields if isinstance(field, (IdentityField, ColumnField))]


def table_name_for(entity_cls: typing.Type[Entity]) -> str:
    return inflection.pluralize(inflection.underscore(entity_cls.__name__))


def _related_identity_name(related: typing.Type[Entity]) -> str:
    return related.__entity_identity__


def build(entity_cls: typing.Type[Entity]) -> EntityDescriptor:
    if not is_entity(entity_cls):
        raise ConfigurationError(f"{entity_cls!r} is not an Entity", details={"type": entity_cls})

    try:
        attr.resolve_types(entity_cls)
    except NameError as e:
        raise ConfigurationError(f"Cannot resolve annotations of {entity_cls.__name__}: {e}") from e

    fields: typing.List[FieldDescriptor] = []
    for field in attr.fields(entity_cls):
        field_type = field.type
        field_name = field.name
        nullable = False

        if Identity.is_identity(field_type):
            fields.append(IdentityField(field_name, _get_wrapped_type(field_type)))
            continue

        if ONE_TO_MANY in field.metadata:
            if not _is_list(field_type) or not is_entity(_get_wrapped_type(field_type)):
                raise ConfigurationError(f"{entity_cls.__name__}.{field_name} must be typed as List[<Entity>]")
            fields.append(
                OneToManyField(field_name, _get_wrapped_type(field_type), mapped_by=field.metadata[ONE_TO_MANY])
            )
            continue

        if _is_list(field_type):
            raise ConfigurationError(f"{entity_cls.__name__}.{field_name} is a list, declare it with one_to_many()")

        if _is_field_nullable(field_type):
            field_type = _unwrap_nullable(field_type)
            nullable = True

        if MANY_TO_ONE in field.metadata or is_entity(field_type):
            if not is_entity(field_type):
                raise ConfigurationError(f"{entity_cls.__name__}.{field_name} must refer to an Entity")
            column = field.metadata.get(MANY_TO_ONE) or f"{field_name}_{_related_identity_name(field_type)}"
            # to-one relations are optional, an absent row leaves the field unset
            fields.append(ManyToOneField(field_name, field_type, True, column=column))
            continue

        fields.append(ColumnField(field_name, field_type, nullable))

    return EntityDescriptor(entity_cls, table_name_for(entity_cls), tuple(fields))
