import abc
import typing

from entity_orm.entity import Entity
from entity_orm.registry import Registry

EntityType = typing.TypeVar("EntityType", bound=Entity)


class OrmManager(abc.ABC):
    registry: Registry

    @abc.abstractmethod
    def prepare_repository_for(self, entity_cls: typing.Type[Entity]) -> None:
        """(Re)creates the table of ``entity_cls``, dropping any existing one."""

    @abc.abstractmethod
    def save(self, entity: Entity) -> None:
        """Inserts a transient entity and writes the generated identity back onto it."""

    @abc.abstractmethod
    def merge(self, entity: Entity) -> None:
        """Updates the plain columns of a persistent entity. Relations are not written."""

    @abc.abstractmethod
    def delete(self, entity: Entity) -> None:
        pass

    @abc.abstractmethod
    def exists(self, entity: Entity) -> bool:
        pass

    @abc.abstractmethod
    def get_by_id(self, entity_cls: typing.Type[EntityType], identity: int) -> typing.Optional[EntityType]:
        pass

    @abc.abstractmethod
    def get_all(self, entity_cls: typing.Type[EntityType]) -> typing.List[EntityType]:
        pass

    @abc.abstractmethod
    def print(self, entity_cls: typing.Type[Entity], file: typing.Optional[typing.TextIO] = None) -> str:
        pass

    def register(self, *entity_classes: typing.Type[Entity]) -> None:
        self.registry.register(*entity_classes)
