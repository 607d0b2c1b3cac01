import typing

import pytest

from entity_orm.entity import Entity, Identity, many_to_one, one_to_many
from entity_orm.entity_descriptor import EntityDescriptor, FieldDescriptor, Visitor, build


class Scribe(Visitor):
    def __init__(self) -> None:
        self.visits_log: typing.List[typing.Tuple[str, str]] = []

    def visit_entity(self, entity: EntityDescriptor) -> None:
        self.visits_log.append(("visit", entity.table_name))

    def leave_entity(self, entity: EntityDescriptor) -> None:
        self.visits_log.append(("leave", entity.table_name))

    def visit_field(self, field: FieldDescriptor) -> None:
        self.visits_log.append((type(field).__name__, field.name))

    visit_identity = visit_column = visit_many_to_one = visit_one_to_many = visit_field


class Dragon(Entity):
    id: Identity[int]
    name: typing.Optional[str] = None
    lair: typing.Optional["Lair"] = many_to_one("lair_id")
    age: int = 0


class Lair(Entity):
    id: Identity[int]
    dragons: typing.List[Dragon] = one_to_many(mapped_by="lair_id")


@pytest.fixture()
def descriptor() -> EntityDescriptor:
    return build(Dragon)


def test_visits_fields_in_declaration_order(descriptor: EntityDescriptor) -> None:
    visitor = Scribe()
    visitor.traverse_from(descriptor)

    assert visitor.visits_log == [
        ("visit", "dragons"),
        ("IdentityField", "id"),
        ("ColumnField", "name"),
        ("ManyToOneField", "lair"),
        ("ColumnField", "age"),
        ("leave", "dragons"),
    ]


def test_dispatches_one_to_many_fields() -> None:
    visitor = Scribe()
    visitor.traverse_from(build(Lair))

    assert visitor.visits_log == [
        ("visit", "lairs"),
        ("IdentityField", "id"),
        ("OneToManyField", "dragons"),
        ("leave", "lairs"),
    ]
