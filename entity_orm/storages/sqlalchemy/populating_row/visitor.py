import logging
from typing import Any, Dict

from entity_orm.entity import Entity
from entity_orm.entity_descriptor import ColumnField, ManyToOneField, Visitor
from entity_orm.types import to_storage

logger = logging.getLogger(__name__)


class RowPopulatingVisitor(Visitor):
    """Collects the values an entity stores in its own row, keyed by column name.

    The identity is left out, the store generates it. With ``only_columns`` many-to-one columns are skipped as well,
    which is what merging writes.
    """

    def __init__(self, entity: Entity, only_columns: bool = False) -> None:
        self._entity = entity
        self._only_columns = only_columns
        self._result: Dict[str, Any] = {}

    @property
    def result(self) -> Dict[str, Any]:
        return self._result

    def visit_column(self, field: ColumnField) -> None:
        self._result[field.name] = to_storage(getattr(self._entity, field.name))

    def visit_many_to_one(self, field: ManyToOneField) -> None:
        if self._only_columns:
            return

        related = getattr(self._entity, field.name)
        value = to_storage(related)
        if related is not None and value is None:
            logger.warning(
                "%s.%s refers to a transient %s, storing NULL in %s",
                type(self._entity).__name__,
                field.name,
                type(related).__name__,
                field.column,
            )
        self._result[field.column] = value
