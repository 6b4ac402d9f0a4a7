"""Models for the API schema registry and incoming requests."""
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class APISchema:
    """A resource schema known to the API layer."""

    id: str
    collection_methods: List[str] = field(default_factory=list)
    resource_methods: List[str] = field(default_factory=list)

    def can_get(self) -> bool:
        """Whether single resources of this schema may be read."""
        return "GET" in (m.upper() for m in self.resource_methods)


@dataclass
class APISchemas:
    """Registry of API schemas, keyed by schema id."""

    schemas: Dict[str, APISchema] = field(default_factory=dict)

    def add_schema(self, schema: APISchema) -> None:
        """Register a schema, replacing any previous one with the same id."""
        self.schemas[schema.id] = schema

    def must_add_schema(self, schema: APISchema) -> "APISchemas":
        """Register a schema whose id must not already be taken."""
        if schema.id in self.schemas:
            raise ValueError(f"schema {schema.id} is already registered")
        self.add_schema(schema)
        return self

    def lookup_schema(self, schema_id: str) -> Optional[APISchema]:
        """Return the schema, or None if it is not registered."""
        return self.schemas.get(schema_id)

    def __len__(self) -> int:
        return len(self.schemas)


@dataclass
class APIRequest:
    """A by-id request routed to the schema definition handler."""

    name: str
    schemas: APISchemas = field(default_factory=APISchemas)
