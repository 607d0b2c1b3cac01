from typing import Optional

from sqlalchemy import Column, MetaData, Table
from sqlalchemy.schema import CreateTable, DropTable

from entity_orm.entity_descriptor import (
    ColumnField,
    EntityDescriptor,
    IdentityField,
    ManyToOneField,
    OneToManyField,
    Visitor,
)
from entity_orm.registry import Registry
from entity_orm.storages.sqlalchemy import native_type_to_column
from entity_orm.storages.sqlalchemy.constructing_table.raw_table import RawTable


class TableConstructingVisitor(Visitor):
    def __init__(self, metadata: MetaData, registry: Registry) -> None:
        self._metadata = metadata
        self._registry = registry
        self._raw_table: Optional[RawTable] = None
        self._result: Optional[Table] = None

    @property
    def result(self) -> Table:
        if self._result is None:
            raise Exception("No table constructed")
        return self._result

    def visit_entity(self, entity: EntityDescriptor) -> None:
        self._raw_table = RawTable(entity.table_name)

    def leave_entity(self, entity: EntityDescriptor) -> None:
        self._result = self._raw_table.materialize(self._metadata)

    def visit_identity(self, field: IdentityField) -> None:
        self._raw_table.append_column(
            Column(field.name, native_type_to_column.IDENTITY, primary_key=True, autoincrement=True)
        )

    def visit_column(self, field: ColumnField) -> None:
        self._raw_table.append_column(
            Column(field.name, native_type_to_column.convert(field.type), nullable=field.nullable)
        )

    def visit_many_to_one(self, field: ManyToOneField) -> None:
        related = self._registry.descriptor_for(field.type)
        self._raw_table.append_column(Column(field.column, native_type_to_column.IDENTITY, nullable=True))
        self._raw_table.append_foreign_key(field.column, related.table_name, related.identity.name)

    def visit_one_to_many(self, field: OneToManyField) -> None:
        # derived from the related table, nothing to store
        pass


def drop_table_statement(table: Table) -> DropTable:
    return DropTable(table, if_exists=True)


def create_table_statement(table: Table) -> CreateTable:
    return CreateTable(table)
