from typing import List

from sqlalchemy import Column
from sqlalchemy.sql.expression import FromClause

from entity_orm.entity_descriptor import ColumnField, IdentityField, Visitor


class ColumnSelectingVisitor(Visitor):
    """Picks identity and plain columns of an entity out of a table, or out of an alias of it."""

    def __init__(self, selectable: FromClause) -> None:
        self._selectable = selectable
        self._columns: List[Column] = []

    @property
    def columns(self) -> List[Column]:
        return self._columns

    def visit_identity(self, field: IdentityField) -> None:
        self._columns.append(self._selectable.c[field.name])

    def visit_column(self, field: ColumnField) -> None:
        self._columns.append(self._selectable.c[field.name])
