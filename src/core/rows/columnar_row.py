"""
ColumnarRow - a positional row read against a shared schema.
"""

from typing import Any, Mapping, Sequence

from pyspark.sql.types import StructType

from src.core.meta_fields import ReservedField
from src.core.models import RowFormat

from .base_row import BaseRow


class ColumnarRow(BaseRow):
    """
    Row whose values are positional against the partition's schema.

    Name lookups use an index built once per partition. Reserved fields are
    read at their canonical positions when the schema has them there.
    """

    row_format = RowFormat.COLUMNAR

    def __init__(
        self,
        values: Sequence[Any],
        schema: StructType,
        index: Mapping[str, int],
        reserved_positions: Mapping[ReservedField, int],
    ):
        super().__init__(schema)
        self._values = tuple(values)
        self._index = index
        self._reserved_positions = reserved_positions

    def field_value(self, key: str | int) -> Any:
        if isinstance(key, str):
            key = self._index[key]
        return self._values[key]

    def has_field(self, name: str) -> bool:
        return name in self._index

    def reserved_value(self, field: ReservedField) -> Any:
        position = self._reserved_positions.get(field)
        if position is None or position >= len(self._values):
            return None
        return self._values[position]

    def field_names(self) -> list[str]:
        return list(self._index)
