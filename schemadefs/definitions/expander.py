"""
Definition Expander - Turns an OpenAPI Kind model into a flat set of named definitions.

Handles:
- Primitive fields (string, integer, number, boolean)
- Arrays and maps, reported with the element type as subtype
- $ref edges, resolved by model name
- Inline objects, named after their path (e.g. io.cattle.management.v2.GlobalRole.spec)
- Self-referencing and mutually referencing models
"""

from typing import Dict, Optional, Set
import logging

from schemadefs.definitions.models import Definition, DefinitionField, SchemaDefinition
from schemadefs.errors import ModelNotKindError
from schemadefs.openapi.models import (
    Arbitrary,
    Array,
    Kind,
    Map,
    Models,
    Primitive,
    Reference,
    Schema,
)

logger = logging.getLogger(__name__)

ARRAY_TYPE = "array"
MAP_TYPE = "map"
ARBITRARY_TYPE = "string"


class DefinitionExpander:
    """Expands models from a Models store into SchemaDefinitions"""

    def __init__(self, models: Models):
        self.models = models

    def expand(self, model_name: str) -> SchemaDefinition:
        """
        Expand a Kind model and everything it references

        Args:
            model_name: Name of a model in the store

        Returns:
            SchemaDefinition whose definitions map holds the model itself and
            every nested type reached from it, each exactly once

        Raises:
            ModelNotKindError: If the model is missing or is not a Kind
        """
        schema = self.models.lookup_model(model_name)
        if not isinstance(schema, Kind):
            raise ModelNotKindError(model_name)

        definitions: Dict[str, Definition] = {}
        self._visit_kind(schema, definitions)

        logger.debug(f"Expanded {model_name} into {len(definitions)} definitions")
        return SchemaDefinition(definition_type=model_name, definitions=definitions)

    def _create_field(self, schema: Schema, definitions: Dict[str, Definition]) -> DefinitionField:
        """Build the field for a schema node, expanding nested Kinds into definitions"""
        if isinstance(schema, Reference):
            target = self._resolve_reference(schema)
            if target is None:
                logger.warning(f"Unresolved reference {schema.reference} at {schema.path}")
                return DefinitionField(type=schema.reference, description=schema.description)
            field = self._create_field(target, definitions)
            field.description = schema.description or field.description
            return field

        if isinstance(schema, Kind):
            return self._visit_kind(schema, definitions)

        if isinstance(schema, Array):
            sub_field = self._create_field(schema.sub_type, definitions)
            return DefinitionField(type=ARRAY_TYPE, sub_type=sub_field.type, description=schema.description)

        if isinstance(schema, Map):
            sub_field = self._create_field(schema.sub_type, definitions)
            return DefinitionField(type=MAP_TYPE, sub_type=sub_field.type, description=schema.description)

        if isinstance(schema, Primitive):
            return DefinitionField(type=schema.type, description=schema.description)

        if isinstance(schema, Arbitrary):
            return DefinitionField(type=ARBITRARY_TYPE, description=schema.description)

        raise TypeError(f"unexpected schema node {type(schema).__name__} at {schema.path}")

    def _visit_kind(self, kind: Kind, definitions: Dict[str, Definition]) -> DefinitionField:
        name = kind.path
        field = DefinitionField(type=name, description=kind.description)
        if name in definitions:
            return field

        # Registered before walking fields so cycles stop here
        definition = Definition(type=name, description=kind.description)
        definitions[name] = definition

        for field_name, field_schema in kind.fields.items():
            resource_field = self._create_field(field_schema, definitions)
            resource_field.required = kind.is_required(field_name)
            definition.resource_fields[field_name] = resource_field

        return field

    @staticmethod
    def _resolve_reference(ref: Reference) -> Optional[Schema]:
        """Follow a chain of references to the first non-reference model"""
        followed: Set[str] = set()
        current: Schema = ref
        while isinstance(current, Reference):
            if current.reference in followed:
                logger.warning(f"Circular reference chain through {current.reference}")
                return None
            followed.add(current.reference)
            current = current.sub_schema()
            if current is None:
                return None
        return current


def expand_definition(models: Models, model_name: str) -> SchemaDefinition:
    """Expand model_name from models into a SchemaDefinition"""
    return DefinitionExpander(models).expand(model_name)
