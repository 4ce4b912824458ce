"""
Schema projection and serialization.
"""

from .projection import SchemaProjector, remove_meta_fields, rewrite_record
from .serialization import SerializedSchemas, parse_schema, schema_to_json

__all__ = [
    "SchemaProjector",
    "SerializedSchemas",
    "parse_schema",
    "remove_meta_fields",
    "rewrite_record",
    "schema_to_json",
]
