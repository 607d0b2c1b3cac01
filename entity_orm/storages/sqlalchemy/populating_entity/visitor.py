import typing

from sqlalchemy.engine import RowMapping

from entity_orm.entity import Entity
from entity_orm.entity_descriptor import ColumnField, EntityDescriptor, FieldDescriptor, IdentityField, Visitor
from entity_orm.errors import HydrationError
from entity_orm.types import from_storage


class EntityPopulatingVisitor(Visitor):
    """Builds a blank entity through its no-argument constructor and copies the row's columns onto it.

    Relations are left as the constructor set them, resolving them is a separate step.
    """

    def __init__(self, row: RowMapping) -> None:
        self._row = row
        self._result: typing.Optional[Entity] = None

    @property
    def result(self) -> Entity:
        return self._result

    def visit_entity(self, entity: EntityDescriptor) -> None:
        try:
            self._result = entity.type()
        except TypeError as e:
            raise HydrationError(
                f"{entity.type.__name__} can not be constructed without arguments, give every field a default",
                details={"type": entity.type},
            ) from e

    def visit_identity(self, field: IdentityField) -> None:
        self._copy(field)

    def visit_column(self, field: ColumnField) -> None:
        self._copy(field)

    def _copy(self, field: FieldDescriptor) -> None:
        try:
            value = self._row[field.name]
        except KeyError as e:
            raise HydrationError(
                f"Column {field.name!r} is missing from the result row",
                details={"type": type(self._result), "columns": list(self._row.keys())},
            ) from e
        setattr(self._result, field.name, from_storage(value, field.type))


def hydrate(descriptor: EntityDescriptor, row: RowMapping) -> Entity:
    visitor = EntityPopulatingVisitor(row)
    visitor.traverse_from(descriptor)
    return visitor.result
