import typing

import pytest

from entity_orm.entity import Entity, Identity, many_to_one, one_to_many
from entity_orm.errors import ConfigurationError
from entity_orm.registry import Registry


class Shelf(Entity):
    id: Identity[int]
    tomes: typing.List["Tome"] = one_to_many(mapped_by="shelf_id")


class Tome(Entity):
    id: Identity[int]
    title: typing.Optional[str] = None
    shelf: typing.Optional[Shelf] = many_to_one("shelf_id")


class Rack(Entity):
    id: Identity[int]
    tomes: typing.List[Tome] = one_to_many(mapped_by="rack_id")


class Cabinet(Entity):
    id: Identity[int]
    tomes: typing.List[Tome] = one_to_many(mapped_by="shelf_id")


@pytest.fixture()
def registry() -> Registry:
    return Registry()


def test_builds_descriptor_once(registry: Registry) -> None:
    descriptor = registry.descriptor_for(Tome)

    assert registry.descriptor_for(Tome) is descriptor
    assert registry.entities_to_descriptors == {Tome: descriptor}


def test_validating_inverse_side_registers_related_entity(registry: Registry) -> None:
    registry.descriptor_for(Shelf)

    assert set(registry.entities_to_descriptors) == {Shelf, Tome}


def test_register_builds_all_given_entities(registry: Registry) -> None:
    registry.register(Tome, Shelf)

    assert set(registry.entities_to_descriptors) == {Shelf, Tome}


def test_mapped_by_has_to_name_a_many_to_one_column(registry: Registry) -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        registry.descriptor_for(Rack)

    assert exc_info.value.details["mapped_by"] == "rack_id"
    assert Rack not in registry.entities_to_descriptors


def test_mapped_by_column_has_to_refer_back_to_owner(registry: Registry) -> None:
    with pytest.raises(ConfigurationError):
        registry.descriptor_for(Cabinet)

    assert Cabinet not in registry.entities_to_descriptors
