"""
OpenAPI v2 Models - Parses a Swagger 2.0 document into a graph of named models.

Each entry of the document's `definitions` section becomes a named model.
Nested schemas are parsed into:
- Kind: objects with named properties
- Map: objects described by additionalProperties, or objects with no properties
- Array: lists with an item schema
- Primitive: string / integer / number / boolean
- Arbitrary: untyped schemas
- Reference: a $ref edge to another named model, resolved by name on demand

References are never inlined, so cyclic documents parse without recursion
problems and consumers decide how far to walk.
"""

from dataclasses import dataclass, field as dataclass_field
from typing import Any, Dict, List, Optional, Tuple
import logging

from schemadefs.errors import ModelParseError

logger = logging.getLogger(__name__)

DEFINITIONS_REF_PREFIX = "#/definitions/"
GVK_EXTENSION = "x-kubernetes-group-version-kind"
PRIMITIVE_TYPES = ("string", "integer", "number", "boolean")


@dataclass
class Schema:
    """Common attributes of every parsed model"""
    path: str
    description: str = ""
    extensions: Dict[str, Any] = dataclass_field(default_factory=dict)


@dataclass
class Primitive(Schema):
    type: str = "string"
    format: str = ""


@dataclass
class Arbitrary(Schema):
    pass


@dataclass
class Array(Schema):
    sub_type: Optional[Schema] = None


@dataclass
class Map(Schema):
    sub_type: Optional[Schema] = None


@dataclass
class Kind(Schema):
    fields: Dict[str, Schema] = dataclass_field(default_factory=dict)
    required_fields: List[str] = dataclass_field(default_factory=list)

    def is_required(self, name: str) -> bool:
        return name in self.required_fields


@dataclass
class Reference(Schema):
    reference: str = ""
    models: Optional["Models"] = dataclass_field(default=None, compare=False, repr=False)

    def sub_schema(self) -> Optional[Schema]:
        """Resolve the referenced model, or None if the document lacks it"""
        if self.models is None:
            return None
        return self.models.lookup_model(self.reference)


class Models:
    """Immutable, name-addressable view over the parsed models"""

    def __init__(
        self,
        models: Dict[str, Schema],
        gvk_index: Optional[Dict[Tuple[str, str, str], str]] = None,
    ):
        self._models = models
        self._gvk_index = gvk_index if gvk_index is not None else {}

    def lookup_model(self, name: str) -> Optional[Schema]:
        """Return the named model, or None when the document does not define it"""
        return self._models.get(name)

    def list_models(self) -> List[str]:
        return sorted(self._models)

    def model_for_gvk(self, group: str, version: str, kind: str) -> Optional[str]:
        """Return the model the document declares for a group/version/kind"""
        return self._gvk_index.get((group, version, kind))

    def __len__(self) -> int:
        return len(self._models)

    def __contains__(self, name: str) -> bool:
        return name in self._models

    def __eq__(self, other) -> bool:
        if isinstance(other, Models):
            return self._models == other._models and self._gvk_index == other._gvk_index
        return False

    def __repr__(self) -> str:
        return f"Models({len(self._models)} models)"


class ModelParser:
    """Parses the `definitions` section of an OpenAPI v2 document"""

    def __init__(self, document: Dict[str, Any]):
        self.document = document
        self._models: Dict[str, Schema] = {}
        self._gvk_index: Dict[Tuple[str, str, str], str] = {}
        self._store = Models(self._models, self._gvk_index)

    def parse(self) -> Models:
        """
        Parse every named definition

        Returns:
            Models store with all definitions and the GVK extension index

        Raises:
            ModelParseError: If the document is not a v2 document or a
                definition is malformed (e.g. declares several types)
        """
        if not isinstance(self.document, dict):
            raise ModelParseError("OpenAPI document must be a JSON object")

        if "openapi" in self.document:
            raise ModelParseError(
                f"OpenAPI {self.document['openapi']} documents are not supported, expected swagger 2.0"
            )

        definitions = self.document.get("definitions") or {}
        if not isinstance(definitions, dict):
            raise ModelParseError("definitions must be a JSON object")

        for name, schema_obj in definitions.items():
            self._models[name] = self.parse_schema(schema_obj, name)
            self._index_gvk(name, schema_obj)

        logger.debug(f"Parsed {len(self._models)} OpenAPI models")
        return self._store

    def parse_schema(self, schema_obj: Any, path: str) -> Schema:
        """Parse a single schema node found at path"""
        if not isinstance(schema_obj, dict):
            raise ModelParseError("schema must be a JSON object", path)

        description = schema_obj.get("description", "") or ""
        extensions = {k: v for k, v in schema_obj.items() if k.startswith("x-")}

        if "$ref" in schema_obj:
            return Reference(
                path=path,
                description=description,
                extensions=extensions,
                reference=self._reference_name(schema_obj["$ref"], path),
                models=self._store,
            )

        schema_type = self._schema_type(schema_obj, path)

        if schema_type in ("object", "") and "properties" in schema_obj:
            return self._parse_kind(schema_obj, path, description, extensions)

        if schema_type in ("object", "") and self._has_additional_properties(schema_obj):
            return Map(
                path=path,
                description=description,
                extensions=extensions,
                sub_type=self._parse_additional_properties(schema_obj["additionalProperties"], path),
            )

        if schema_type == "array":
            items = schema_obj.get("items")
            if items is None:
                raise ModelParseError("array is missing items", path)
            return Array(
                path=path,
                description=description,
                extensions=extensions,
                sub_type=self.parse_schema(items, f"{path}[]"),
            )

        # An object without properties holds keys of any shape
        if schema_type == "object":
            return Map(
                path=path,
                description=description,
                extensions=extensions,
                sub_type=Arbitrary(path=f"{path}{{}}"),
            )

        if schema_type in PRIMITIVE_TYPES:
            return Primitive(
                path=path,
                description=description,
                extensions=extensions,
                type=schema_type,
                format=schema_obj.get("format", "") or "",
            )

        if schema_type == "":
            return Arbitrary(path=path, description=description, extensions=extensions)

        raise ModelParseError(f"unknown type {schema_type!r}", path)

    def _parse_kind(
        self,
        schema_obj: Dict[str, Any],
        path: str,
        description: str,
        extensions: Dict[str, Any],
    ) -> Kind:
        properties = schema_obj["properties"]
        if not isinstance(properties, dict):
            raise ModelParseError("properties must be a JSON object", path)

        fields = {
            name: self.parse_schema(prop_schema, f"{path}.{name}")
            for name, prop_schema in properties.items()
        }
        required = schema_obj.get("required") or []
        return Kind(
            path=path,
            description=description,
            extensions=extensions,
            fields=fields,
            required_fields=list(required),
        )

    def _parse_additional_properties(self, additional: Any, path: str) -> Schema:
        # additionalProperties: true allows values of any shape
        if additional is True:
            return Arbitrary(path=f"{path}{{}}")
        return self.parse_schema(additional, f"{path}{{}}")

    @staticmethod
    def _has_additional_properties(schema_obj: Dict[str, Any]) -> bool:
        additional = schema_obj.get("additionalProperties")
        return additional is True or isinstance(additional, dict)

    @staticmethod
    def _schema_type(schema_obj: Dict[str, Any], path: str) -> str:
        schema_type = schema_obj.get("type")
        if schema_type is None:
            return ""
        if isinstance(schema_type, list):
            if len(schema_type) > 1:
                raise ModelParseError(f"definition has multiple types: {schema_type}", path)
            return schema_type[0] if schema_type else ""
        if not isinstance(schema_type, str):
            raise ModelParseError(f"invalid type declaration: {schema_type!r}", path)
        return schema_type

    @staticmethod
    def _reference_name(ref: Any, path: str) -> str:
        if not isinstance(ref, str) or not ref.startswith(DEFINITIONS_REF_PREFIX):
            raise ModelParseError(f"unsupported reference {ref!r}", path)
        return ref[len(DEFINITIONS_REF_PREFIX):]

    def _index_gvk(self, name: str, schema_obj: Dict[str, Any]) -> None:
        for gvk in schema_obj.get(GVK_EXTENSION) or []:
            if not isinstance(gvk, dict) or "kind" not in gvk:
                continue
            key = (gvk.get("group", ""), gvk.get("version", ""), gvk["kind"])
            self._gvk_index.setdefault(key, name)


def parse_document(document: Dict[str, Any]) -> Models:
    """Parse an OpenAPI v2 document into a Models store"""
    return ModelParser(document).parse()
