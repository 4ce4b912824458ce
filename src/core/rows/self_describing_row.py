"""
SelfDescribingRow - a row carrying its own field-name -> value mapping.
"""

from typing import Any, Mapping

from pyspark.sql.types import StructType

from src.core.meta_fields import ReservedField
from src.core.models import RowFormat

from .base_row import BaseRow


class SelfDescribingRow(BaseRow):
    """
    Row whose values are keyed by field name.

    The schema lists the fields in order; positional reads go through it.
    Reserved fields are read by name.
    """

    row_format = RowFormat.SELF_DESCRIBING

    def __init__(self, values: Mapping[str, Any], schema: StructType):
        super().__init__(schema)
        self._values = dict(values)

    def field_value(self, key: str | int) -> Any:
        if isinstance(key, int):
            key = self.schema.fields[key].name
        return self._values[key]

    def has_field(self, name: str) -> bool:
        return name in self._values

    def reserved_value(self, field: ReservedField) -> Any:
        return self._values.get(field.column_name)

    def field_names(self) -> list[str]:
        return list(self._values)
