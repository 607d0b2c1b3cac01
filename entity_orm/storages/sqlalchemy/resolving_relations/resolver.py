import logging
import typing
from collections import deque

from sqlalchemy.engine import Result, RowMapping
from sqlalchemy.sql.expression import Executable

from entity_orm.entity import Entity, identity_of
from entity_orm.entity_descriptor import ManyToOneField, OneToManyField
from entity_orm.storages.sqlalchemy import statements
from entity_orm.storages.sqlalchemy.populating_entity.visitor import hydrate
from entity_orm.storages.sqlalchemy.registry import SaRegistry

logger = logging.getLogger(__name__)

Execute = typing.Callable[[Executable, typing.Optional[typing.Dict[str, typing.Any]]], Result]


class RelationResolver:
    """Hydrates rows of one read call and fills in their relations.

    Within a resolver a row maps to exactly one instance, keyed by type and identity, and every instance has its
    relations fetched once. That is what keeps bidirectional relations from expanding forever: the author found
    through a book is the very author whose books are being loaded.
    """

    def __init__(self, execute: Execute, registry: SaRegistry) -> None:
        self._execute = execute
        self._registry = registry
        self._identity_map: typing.Dict[typing.Tuple[typing.Type[Entity], typing.Any], Entity] = {}
        self._pending: typing.Deque[Entity] = deque()

    def hydrate(self, entity_cls: typing.Type[Entity], row: RowMapping) -> Entity:
        descriptor = self._registry.descriptor_for(entity_cls)
        key = (entity_cls, row.get(descriptor.identity.name))
        if key in self._identity_map:
            return self._identity_map[key]

        instance = hydrate(descriptor, row)
        self._identity_map[key] = instance
        self._pending.append(instance)
        return instance

    def resolve(self) -> None:
        while self._pending:
            self._resolve_relations(self._pending.popleft())

    def _resolve_relations(self, entity: Entity) -> None:
        entity_cls = type(entity)
        descriptor = self._registry.descriptor_for(entity_cls)
        table = self._registry.table_for(entity_cls)
        params = {statements.IDENTITY_PARAM: identity_of(entity)}

        for field in descriptor.fields_of(ManyToOneField):
            statement = statements.select_many_to_one_statement(
                table,
                descriptor,
                field,
                self._registry.table_for(field.type),
                self._registry.descriptor_for(field.type),
            )
            row = self._execute(statement, params).mappings().first()
            setattr(entity, field.name, None if row is None else self.hydrate(field.type, row))

        for field in descriptor.fields_of(OneToManyField):
            statement = statements.select_one_to_many_statement(
                field, self._registry.table_for(field.type), self._registry.descriptor_for(field.type)
            )
            rows = self._execute(statement, params).mappings().all()
            setattr(entity, field.name, [self.hydrate(field.type, row) for row in rows])

        logger.debug("Relations of %s have been fetched", entity)
