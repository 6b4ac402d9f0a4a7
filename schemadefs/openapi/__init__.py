"""
OpenAPI Module - In-memory model graph for OpenAPI v2 (swagger 2.0) documents

Supports:
- Named definitions with lazy $ref resolution
- Object / map / array / primitive / untyped schemas
- Rejection of multi-typed schemas
- x-kubernetes-group-version-kind indexing
"""

from .models import (
    Arbitrary,
    Array,
    Kind,
    Map,
    ModelParser,
    Models,
    Primitive,
    Reference,
    Schema,
    parse_document,
)

__all__ = [
    "Arbitrary",
    "Array",
    "Kind",
    "Map",
    "ModelParser",
    "Models",
    "Primitive",
    "Reference",
    "Schema",
    "parse_document",
]
