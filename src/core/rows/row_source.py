"""
Row sources turning engine rows into BaseRow views.

The row representation is chosen once per batch; a row source is built once
per partition and wraps each incoming row without re-inspecting the schema.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, Iterator, Mapping

from pyspark.sql.types import StructType

from src.core.meta_fields import ReservedField
from src.core.models import RowFormat
from src.core.schema.projection import rewrite_record

from .base_row import BaseRow
from .columnar_row import ColumnarRow
from .self_describing_row import SelfDescribingRow


class RowSource(ABC):
    """
    Wraps raw rows of one partition into BaseRow instances.
    """

    row_format: RowFormat

    def __init__(self, schema: StructType):
        """
        Initialize row source.

        Args:
            schema: Schema the wrapped rows are read against
        """
        self.schema = schema

    @abstractmethod
    def wrap(self, raw: Any) -> BaseRow:
        pass

    def rows(self, raw_rows: Iterable[Any]) -> Iterator[BaseRow]:
        for raw in raw_rows:
            yield self.wrap(raw)


class SelfDescribingRowSource(RowSource):
    """
    Converts rows into self-describing records shaped by the writer schema.

    Accepts pyspark Rows or plain mappings. Fields the writer schema does not
    declare are dropped, declared fields the row lacks are null.
    """

    row_format = RowFormat.SELF_DESCRIBING

    def wrap(self, raw: Any) -> SelfDescribingRow:
        if hasattr(raw, "asDict"):
            values = raw.asDict(recursive=True)
        elif isinstance(raw, Mapping):
            values = raw
        else:
            raise TypeError(f"Cannot read {type(raw).__name__} as a self-describing row")
        return SelfDescribingRow(rewrite_record(values, self.schema), self.schema)


class ColumnarRowSource(RowSource):
    """
    Wraps positional rows against the batch's source schema.
    """

    row_format = RowFormat.COLUMNAR

    def __init__(self, schema: StructType):
        super().__init__(schema)
        self.index = {field.name: pos for pos, field in enumerate(schema.fields)}
        self.reserved_positions = self._reserved_positions()

    def _reserved_positions(self) -> dict[ReservedField, int]:
        """Prefer canonical positions; fall back to a name lookup when columns are reordered."""
        names = self.schema.fieldNames()
        positions = {}
        for field in ReservedField:
            if field.position < len(names) and names[field.position] == field.column_name:
                positions[field] = field.position
            elif field.column_name in self.index:
                positions[field] = self.index[field.column_name]
        return positions

    def wrap(self, raw: Any) -> ColumnarRow:
        return ColumnarRow(raw, self.schema, self.index, self.reserved_positions)


def create_row_source(
    row_format: RowFormat,
    source_schema: StructType,
    writer_schema: StructType,
) -> RowSource:
    """
    Build the row source for a batch.

    Args:
        row_format: Row representation selected for the batch
        source_schema: Schema of the incoming rows
        writer_schema: Schema self-describing records are converted to

    Returns:
        RowSource for one partition
    """
    if row_format == RowFormat.SELF_DESCRIBING:
        return SelfDescribingRowSource(writer_schema)
    if row_format == RowFormat.COLUMNAR:
        return ColumnarRowSource(source_schema)
    raise ValueError(f"Unsupported row format: {row_format}")
