"""
Structural projection of rows onto target schemas.

Rewriting is best effort: values of fields present in both shapes are kept,
target fields the row lacks become null, extra row fields are ignored.
Nested containers are copied so payloads never alias input rows.
"""

import copy
from typing import Any, Mapping

from pyspark.sql.types import ArrayType, DataType, MapType, StructType

from src.core.meta_fields import META_COLUMNS_WITH_OPERATION


def _as_mapping(value: Any) -> Mapping[str, Any] | None:
    if isinstance(value, Mapping):
        return value
    if hasattr(value, "asDict"):
        return value.asDict(recursive=True)
    return None


def _rewrite_value(value: Any, data_type: DataType) -> Any:
    if value is None:
        return None
    if isinstance(data_type, StructType):
        nested = _as_mapping(value)
        return rewrite_record(nested, data_type) if nested is not None else value
    if isinstance(data_type, ArrayType) and isinstance(value, (list, tuple)):
        return [_rewrite_value(item, data_type.elementType) for item in value]
    if isinstance(data_type, MapType) and isinstance(value, Mapping):
        return {k: _rewrite_value(v, data_type.valueType) for k, v in value.items()}
    if isinstance(value, (list, dict, bytearray)):
        return copy.deepcopy(value)
    return value


def rewrite_record(values: Mapping[str, Any], schema: StructType) -> dict[str, Any]:
    """
    Rewrite a name -> value mapping onto a schema.

    Args:
        values: Row values keyed by field name
        schema: Target shape

    Returns:
        New dict with exactly the schema's fields, in schema order
    """
    return {
        field.name: _rewrite_value(values.get(field.name), field.dataType)
        for field in schema.fields
    }


def remove_meta_fields(schema: StructType) -> StructType:
    """Return the schema without reserved metadata and operation columns."""
    return StructType([f for f in schema.fields if f.name not in META_COLUMNS_WITH_OPERATION])


class SchemaProjector:
    """
    Projects rows onto the payload schema of one partition.

    The target schema is resolved once; ``project`` only copies values.
    """

    def __init__(self, target_schema: StructType):
        """
        Initialize projector.

        Args:
            target_schema: Shape of the stored payload
        """
        self.target_schema = target_schema
        self._fields = [(f.name, f.dataType) for f in target_schema.fields]

    @classmethod
    def for_write(
        cls,
        writer_schema: StructType,
        data_file_schema: StructType,
        drop_partition_columns: bool,
        strip_meta_fields: bool,
    ) -> "SchemaProjector":
        """
        Resolve the payload schema for a write.

        Args:
            writer_schema: Schema rows are written with, possibly with reserved fields
            data_file_schema: Persisted shape, without partition columns when they are dropped
            drop_partition_columns: Project onto the data-file schema
            strip_meta_fields: Remove reserved metadata columns (prepped and merge-prepared rows)

        Returns:
            SchemaProjector for the resolved payload schema
        """
        target = data_file_schema if drop_partition_columns else writer_schema
        if strip_meta_fields:
            target = remove_meta_fields(target)
        return cls(target)

    @property
    def field_names(self) -> list[str]:
        return [name for name, _ in self._fields]

    def project(self, row: Any) -> dict[str, Any]:
        """
        Copy a row's values into the payload shape.

        Args:
            row: Any row exposing ``get(name)`` (BaseRow or a mapping)

        Returns:
            Fresh payload dict in target schema order
        """
        return {name: _rewrite_value(row.get(name), data_type) for name, data_type in self._fields}
