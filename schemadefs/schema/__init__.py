"""Schema registry used to gate definition lookups."""

from .models import APIRequest, APISchema, APISchemas

__all__ = ["APIRequest", "APISchema", "APISchemas"]
