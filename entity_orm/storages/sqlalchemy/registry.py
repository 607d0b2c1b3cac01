from typing import Dict, Type

import attr
from sqlalchemy import MetaData, Table

from entity_orm.entity import Entity
from entity_orm.entity_descriptor import ManyToOneField
from entity_orm.registry import Registry
from entity_orm.storages.sqlalchemy.constructing_table.visitor import TableConstructingVisitor


@attr.s(auto_attribs=True)
class SaRegistry(Registry):
    metadata: MetaData = attr.Factory(MetaData)
    entities_tables: Dict[Type[Entity], Table] = attr.Factory(dict)

    def table_for(self, entity_cls: Type[Entity]) -> Table:
        try:
            return self.entities_tables[entity_cls]
        except KeyError:
            pass

        descriptor = self.descriptor_for(entity_cls)
        visitor = TableConstructingVisitor(self.metadata, self)
        visitor.traverse_from(descriptor)
        self.entities_tables[entity_cls] = visitor.result

        # foreign keys are declared by name, the referenced tables have to live in the same metadata
        for field in descriptor.fields_of(ManyToOneField):
            self.table_for(field.type)

        return visitor.result
