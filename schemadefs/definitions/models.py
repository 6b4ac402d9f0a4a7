"""Data models for expanded schema definitions."""

from dataclasses import dataclass, field as dataclass_field
from typing import Any, Dict

SCHEMA_DEFINITION_TYPE = "schemaDefinition"


@dataclass
class DefinitionField:
    """A single field of a definition"""
    type: str
    sub_type: str = ""  # element type for "array" and "map" fields
    description: str = ""
    required: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire representation, omitting empty values"""
        result: Dict[str, Any] = {"type": self.type}
        if self.sub_type:
            result["subtype"] = self.sub_type
        if self.description:
            result["description"] = self.description
        if self.required:
            result["required"] = True
        return result


@dataclass
class Definition:
    """An expanded object type and its fields"""
    type: str
    description: str = ""
    resource_fields: Dict[str, DefinitionField] = dataclass_field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "description": self.description,
            "resourceFields": {k: v.to_dict() for k, v in self.resource_fields.items()},
        }


@dataclass
class SchemaDefinition:
    """A top-level type plus every definition reachable from it"""
    definition_type: str
    definitions: Dict[str, Definition] = dataclass_field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "definitionType": self.definition_type,
            "definitions": {k: v.to_dict() for k, v in self.definitions.items()},
        }


@dataclass
class APIObject:
    """Response object handed back to the request layer"""
    id: str
    object: SchemaDefinition
    type: str = SCHEMA_DEFINITION_TYPE

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"id": self.id, "type": self.type}
        result.update(self.object.to_dict())
        return result
