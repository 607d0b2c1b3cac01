from typing import Dict, Type

import attr

from entity_orm.entity import Entity
from entity_orm.entity_descriptor import EntityDescriptor, ManyToOneField, OneToManyField, build
from entity_orm.errors import ConfigurationError


@attr.s(auto_attribs=True)
class Registry:
    entities_to_descriptors: Dict[Type[Entity], EntityDescriptor] = attr.Factory(dict)

    def descriptor_for(self, entity_cls: Type[Entity]) -> EntityDescriptor:
        try:
            return self.entities_to_descriptors[entity_cls]
        except KeyError:
            pass

        descriptor = build(entity_cls)
        # stored before validation so relation cycles resolve to the cached descriptor
        self.entities_to_descriptors[entity_cls] = descriptor
        try:
            self._validate_inverse_sides(descriptor)
        except ConfigurationError:
            del self.entities_to_descriptors[entity_cls]
            raise
        return descriptor

    def register(self, *entity_classes: Type[Entity]) -> None:
        for entity_cls in entity_classes:
            self.descriptor_for(entity_cls)

    def _validate_inverse_sides(self, descriptor: EntityDescriptor) -> None:
        for field in descriptor.fields_of(OneToManyField):
            related = self.descriptor_for(field.type)
            owning_sides = [
                related_field
                for related_field in related.fields_of(ManyToOneField)
                if related_field.column == field.mapped_by
            ]
            if not owning_sides:
                raise ConfigurationError(
                    f"{descriptor.type.__name__}.{field.name} is mapped by {field.mapped_by!r}, "
                    f"which is not a many-to-one column of {related.type.__name__}",
                    details={"mapped_by": field.mapped_by, "related": related.type},
                )
            if not issubclass(descriptor.type, owning_sides[0].type):
                raise ConfigurationError(
                    f"{related.type.__name__}.{owning_sides[0].name} does not refer back to {descriptor.type.__name__}"
                )
