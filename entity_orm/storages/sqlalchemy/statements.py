"""Statement synthesis for entity CRUD.

Every function here only builds a statement. Values always travel as bound parameters, the identity through a
``bindparam`` named ``identity`` unless it is given directly.
"""
import typing

from sqlalchemy import Table, bindparam, delete, exists, insert, select, update
from sqlalchemy.sql.expression import FromClause, Select
from sqlalchemy.sql.dml import Delete, Insert, Update

from entity_orm.entity import Entity
from entity_orm.entity_descriptor import EntityDescriptor, ManyToOneField, OneToManyField
from entity_orm.storages.sqlalchemy.populating_row.visitor import RowPopulatingVisitor
from entity_orm.storages.sqlalchemy.querying.visitor import ColumnSelectingVisitor

IDENTITY_PARAM = "identity"


def _selected_columns(descriptor: EntityDescriptor, selectable: FromClause) -> typing.List:
    visitor = ColumnSelectingVisitor(selectable)
    visitor.traverse_from(descriptor)
    return visitor.columns


def insert_statement(table: Table, descriptor: EntityDescriptor, entity: Entity) -> Insert:
    visitor = RowPopulatingVisitor(entity)
    visitor.traverse_from(descriptor)
    return insert(table).values(visitor.result)


def merge_values(descriptor: EntityDescriptor, entity: Entity) -> typing.Dict[str, typing.Any]:
    visitor = RowPopulatingVisitor(entity, only_columns=True)
    visitor.traverse_from(descriptor)
    return visitor.result


def update_statement(table: Table, descriptor: EntityDescriptor, entity: Entity) -> Update:
    identity = table.c[descriptor.identity.name]
    return update(table).where(identity == bindparam(IDENTITY_PARAM)).values(merge_values(descriptor, entity))


def select_by_id_statement(table: Table, descriptor: EntityDescriptor) -> Select:
    identity = table.c[descriptor.identity.name]
    return select(*_selected_columns(descriptor, table)).where(identity == bindparam(IDENTITY_PARAM))


def select_all_statement(table: Table, descriptor: EntityDescriptor) -> Select:
    return select(*_selected_columns(descriptor, table)).order_by(table.c[descriptor.identity.name])


def delete_statement(table: Table, descriptor: EntityDescriptor) -> Delete:
    identity = table.c[descriptor.identity.name]
    return delete(table).where(identity == bindparam(IDENTITY_PARAM))


def exists_statement(table: Table, descriptor: EntityDescriptor) -> Select:
    identity = table.c[descriptor.identity.name]
    return select(exists().where(identity == bindparam(IDENTITY_PARAM)))


def select_many_to_one_statement(
    table: Table,
    descriptor: EntityDescriptor,
    field: ManyToOneField,
    related_table: Table,
    related_descriptor: EntityDescriptor,
) -> Select:
    """Selects the entity ``field`` points to, joining the owning row on its foreign-key column."""
    related: FromClause = related_table
    if related_table is table:
        related = related_table.alias(f"{field.name}_{related_table.name}")

    join = table.join(related, table.c[field.column] == related.c[related_descriptor.identity.name])
    return (
        select(*_selected_columns(related_descriptor, related))
        .select_from(join)
        .where(table.c[descriptor.identity.name] == bindparam(IDENTITY_PARAM))
    )


def select_one_to_many_statement(
    field: OneToManyField, related_table: Table, related_descriptor: EntityDescriptor
) -> Select:
    return (
        select(*_selected_columns(related_descriptor, related_table))
        .where(related_table.c[field.mapped_by] == bindparam(IDENTITY_PARAM))
        .order_by(related_table.c[related_descriptor.identity.name])
    )


def select_rows_statement(table: Table) -> Select:
    return select(table).order_by(*table.primary_key.columns)
