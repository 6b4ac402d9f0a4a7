"""
Definitions Module - Schema definition resolution

Reconciles the cluster's OpenAPI v2 models with its discovery data and
serves fully expanded definitions for resource schemas.
Supports:
- Schema id -> model name correlation
- Recursive, cycle-safe definition expansion
- Atomic publication of refreshed state
- Periodic background refresh
"""

from .expander import DefinitionExpander, expand_definition
from .handler import ResolverState, SchemaDefinitionHandler
from .models import APIObject, Definition, DefinitionField, SchemaDefinition
from .naming import build_schema_to_model, model_name_for, schema_id_for
from .refresher import SchemaRefresher

__all__ = [
    "DefinitionExpander",
    "expand_definition",
    "ResolverState",
    "SchemaDefinitionHandler",
    "APIObject",
    "Definition",
    "DefinitionField",
    "SchemaDefinition",
    "build_schema_to_model",
    "model_name_for",
    "schema_id_for",
    "SchemaRefresher",
]
