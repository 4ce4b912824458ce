"""
Schema serialization for shipping schemas to executors.

Schemas travel as JSON strings and are parsed once per partition.
"""

import json
from typing import NamedTuple

from pydantic import BaseModel
from pyspark.sql.types import StructType


def schema_to_json(schema: StructType) -> str:
    return schema.json()


def parse_schema(schema_json: str) -> StructType:
    """
    Parse a schema serialized with ``schema_to_json``.

    Raises:
        ValueError: If the JSON does not describe a struct
    """
    parsed = json.loads(schema_json)
    if not isinstance(parsed, dict) or parsed.get("type") != "struct":
        raise ValueError("Serialized schema must describe a struct type")
    return StructType.fromJson(parsed)


class ParsedSchemas(NamedTuple):
    source: StructType
    writer: StructType
    data_file: StructType


class SerializedSchemas(BaseModel):
    """
    The three schema roles of a batch, serialized.

    Attributes:
        source: Shape of the incoming rows
        writer: Shape rows are written with (may include reserved fields)
        data_file: Persisted shape (may exclude partition columns)
    """

    source: str
    writer: str
    data_file: str

    @classmethod
    def from_schemas(
        cls,
        source: StructType,
        writer: StructType,
        data_file: StructType | None = None,
    ) -> "SerializedSchemas":
        """Serialize schemas; the data-file schema defaults to the writer schema."""
        return cls(
            source=schema_to_json(source),
            writer=schema_to_json(writer),
            data_file=schema_to_json(data_file if data_file is not None else writer),
        )

    def parse(self) -> ParsedSchemas:
        return ParsedSchemas(
            source=parse_schema(self.source),
            writer=parse_schema(self.writer),
            data_file=parse_schema(self.data_file),
        )

    class Config:
        frozen = True
