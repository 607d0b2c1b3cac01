import logging
import sys
from typing import Any, Dict, List, Optional, TextIO, Type

from sqlalchemy.engine import Connection, Result
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.expression import Executable

from entity_orm.entity import Entity, identity_of, set_identity
from entity_orm.entity_descriptor import ManyToOneField
from entity_orm.errors import DuplicateError, NotFoundError, StatementError
from entity_orm.formatting import tabulate
from entity_orm.manager import EntityType, OrmManager
from entity_orm.storages.sqlalchemy import statements
from entity_orm.storages.sqlalchemy.constructing_table.visitor import create_table_statement, drop_table_statement
from entity_orm.storages.sqlalchemy.registry import SaRegistry
from entity_orm.storages.sqlalchemy.resolving_relations.resolver import RelationResolver

logger = logging.getLogger(__name__)


class SqlAlchemyOrmManager(OrmManager):
    """Maps entities onto tables reached through one SQLAlchemy connection.

    The manager never commits nor rolls back, transaction boundaries belong to whoever owns the connection. None of
    the compound operations (drop then create, probe then insert) is atomic, callers sharing a connection have to
    serialize them.
    """

    def __init__(self, connection: Connection, registry: Optional[SaRegistry] = None) -> None:
        self._connection = connection
        self.registry = registry if registry is not None else SaRegistry()

    def _execute(self, statement: Executable, params: Optional[Dict[str, Any]] = None) -> Result:
        try:
            return self._connection.execute(statement, params)
        except SQLAlchemyError as e:
            raise StatementError(f"Statement failed: {e}", details={"statement": str(statement)}) from e

    def prepare_repository_for(self, entity_cls: Type[Entity]) -> None:
        table = self.registry.table_for(entity_cls)
        self._execute(drop_table_statement(table))
        self._execute(create_table_statement(table))
        logger.info("Table %s has been created", table.name)

    def exists(self, entity: Entity) -> bool:
        identity = identity_of(entity)
        if identity is None:
            return False

        entity_cls = type(entity)
        statement = statements.exists_statement(
            self.registry.table_for(entity_cls), self.registry.descriptor_for(entity_cls)
        )
        return bool(self._execute(statement, {statements.IDENTITY_PARAM: identity}).scalar())

    def save(self, entity: Entity) -> None:
        entity_cls = type(entity)
        descriptor = self.registry.descriptor_for(entity_cls)
        if self.exists(entity):
            raise DuplicateError(
                f"{entity_cls.__name__} with {descriptor.identity.name} {identity_of(entity)} already exists",
                details={"identity": identity_of(entity)},
            )

        statement = statements.insert_statement(self.registry.table_for(entity_cls), descriptor, entity)
        primary_key = self._execute(statement).inserted_primary_key
        if not primary_key or primary_key[0] is None:
            raise StatementError(f"Saving {entity_cls.__name__} failed, no identity obtained")

        set_identity(entity, primary_key[0])
        logger.info("%s has been saved with %s %s", entity_cls.__name__, descriptor.identity.name, primary_key[0])

    def merge(self, entity: Entity) -> None:
        entity_cls = type(entity)
        descriptor = self.registry.descriptor_for(entity_cls)
        identity = identity_of(entity)

        if not statements.merge_values(descriptor, entity):
            # nothing to write, presence is all there is to check
            found = self.exists(entity)
        else:
            statement = statements.update_statement(self.registry.table_for(entity_cls), descriptor, entity)
            found = identity is not None and self._execute(statement, {statements.IDENTITY_PARAM: identity}).rowcount > 0

        if not found:
            raise NotFoundError(
                f"There is no {entity_cls.__name__} with {descriptor.identity.name} {identity}",
                details={"identity": identity},
            )
        logger.info("%s has been merged", entity_cls.__name__)

    def delete(self, entity: Entity) -> None:
        entity_cls = type(entity)
        descriptor = self.registry.descriptor_for(entity_cls)
        identity = identity_of(entity)

        found = False
        if identity is not None:
            statement = statements.delete_statement(self.registry.table_for(entity_cls), descriptor)
            found = self._execute(statement, {statements.IDENTITY_PARAM: identity}).rowcount > 0

        if not found:
            raise NotFoundError(
                f"There is no {entity_cls.__name__} with {descriptor.identity.name} {identity}",
                details={"identity": identity},
            )
        logger.info("%s has been deleted", entity_cls.__name__)

    def get_by_id(self, entity_cls: Type[EntityType], identity: int) -> Optional[EntityType]:
        statement = statements.select_by_id_statement(
            self.registry.table_for(entity_cls), self.registry.descriptor_for(entity_cls)
        )
        row = self._execute(statement, {statements.IDENTITY_PARAM: identity}).mappings().first()
        if row is None:
            return None

        resolver = RelationResolver(self._execute, self.registry)
        entity = resolver.hydrate(entity_cls, row)
        resolver.resolve()
        return entity

    def get_all(self, entity_cls: Type[EntityType]) -> List[EntityType]:
        statement = statements.select_all_statement(
            self.registry.table_for(entity_cls), self.registry.descriptor_for(entity_cls)
        )
        rows = self._execute(statement).mappings().all()

        resolver = RelationResolver(self._execute, self.registry)
        entities = [resolver.hydrate(entity_cls, row) for row in rows]
        resolver.resolve()
        return entities

    def print(self, entity_cls: Type[Entity], file: Optional[TextIO] = None) -> str:
        """Renders every stored row of the table, headed by field names.

        Many-to-one columns are headed by their field, e.g. ``author`` rather than ``author_id``, and show the stored
        identity.
        """
        table = self.registry.table_for(entity_cls)
        rows = self._execute(statements.select_rows_statement(table)).all()

        relation_names = {
            field.column: field.name for field in self.registry.descriptor_for(entity_cls).fields_of(ManyToOneField)
        }
        headers = [relation_names.get(column.name, column.name) for column in table.columns]
        rendered = tabulate(rows, headers=headers)
        print(rendered, file=file if file is not None else sys.stdout)
        logger.info("Table %s has been printed", table.name)
        return rendered
