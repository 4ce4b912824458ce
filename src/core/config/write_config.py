"""
Write configuration for record materialization.

Options arrive as a flat key -> value map (the same keys the storage
engine's datasource accepts). WriteConfig parses the keys this package acts
on and keeps the full map so it can be handed to the key generator.
"""

from enum import Enum
from typing import Any, Mapping

from pydantic import BaseModel, Field, field_validator

from src.core.errors import KeyGeneratorConfigError
from src.core.models import RowFormat, WriteOperationType

OPERATION = "hoodie.datasource.write.operation"
PREPPED = "_hoodie.datasource.write.prepped"
SQL_MERGE_INTO_PREPPED = "_hoodie.spark.sql.merge.into.prepped"
DROP_PARTITION_COLUMNS = "hoodie.datasource.write.drop.partition.columns"
COMBINE_BEFORE_INSERT = "hoodie.combine.before.insert"
COMBINE_BEFORE_UPSERT = "hoodie.combine.before.upsert"
INSERT_DROP_DUPS = "hoodie.datasource.write.insert.drop.duplicates"
PRECOMBINE_FIELD = "hoodie.datasource.write.precombine.field"
CONSISTENT_LOGICAL_TIMESTAMP = "hoodie.datasource.write.keygenerator.consistent.logical.timestamp.enabled"
PAYLOAD_CLASS_NAME = "hoodie.datasource.write.payload.class"
KEY_GENERATOR_CLASS = "hoodie.datasource.write.keygenerator.class"
RECORDKEY_FIELD = "hoodie.datasource.write.recordkey.field"
INSTANT_TIME = "hoodie.write.instant.time"
ROW_FORMAT = "hoodie.write.row.format"

# Injected into key generator properties when record keys are auto-generated
RECORD_KEY_GEN_PARTITION_ID = "hoodie.record.key.gen.partition.id"
RECORD_KEY_GEN_INSTANT_TIME = "hoodie.record.key.gen.instant.time"

DEFAULT_PAYLOAD_CLASS = "org.apache.hudi.common.model.OverwriteWithLatestAvroPayload"


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


class WriteConfig(BaseModel):
    """
    Immutable write options for one batch.

    Attributes:
        operation: Write operation kind
        is_prepped: Rows already carry metadata from a planning pass
        sql_merge_into_prepped: Rows are prepared for a merge-style write
        drop_partition_columns: Remove partition columns from stored payloads
        combine_before_insert: Deduplicate by key before insert
        combine_before_upsert: Deduplicate by key before upsert
        insert_drop_duplicates: Drop duplicate inserts
        precombine_field: Field ranking duplicates, may be a dotted path
        consistent_logical_timestamp: Render logical timestamps as epoch numbers
        payload_class: Opaque payload class identifier
        key_generator_class: Dotted path or registered name of the key generator
        record_key_field: Configured record key field(s); absent means auto keys
        instant_time: Instant token of the batch being written
        row_format: Row representation to read the batch as
        options: The full flat option map
    """

    operation: WriteOperationType = Field(WriteOperationType.UPSERT, alias=OPERATION)
    is_prepped: bool = Field(False, alias=PREPPED)
    sql_merge_into_prepped: bool = Field(False, alias=SQL_MERGE_INTO_PREPPED)
    drop_partition_columns: bool = Field(False, alias=DROP_PARTITION_COLUMNS)
    combine_before_insert: bool = Field(False, alias=COMBINE_BEFORE_INSERT)
    combine_before_upsert: bool = Field(True, alias=COMBINE_BEFORE_UPSERT)
    insert_drop_duplicates: bool = Field(False, alias=INSERT_DROP_DUPS)
    precombine_field: str = Field("ts", min_length=1, alias=PRECOMBINE_FIELD)
    consistent_logical_timestamp: bool = Field(False, alias=CONSISTENT_LOGICAL_TIMESTAMP)
    payload_class: str = Field(DEFAULT_PAYLOAD_CLASS, min_length=1, alias=PAYLOAD_CLASS_NAME)
    key_generator_class: str | None = Field(None, alias=KEY_GENERATOR_CLASS)
    record_key_field: str | None = Field(None, alias=RECORDKEY_FIELD)
    instant_time: str | None = Field(None, alias=INSTANT_TIME)
    row_format: RowFormat = Field(RowFormat.SELF_DESCRIBING, alias=ROW_FORMAT)
    options: dict[str, str] = Field(default_factory=dict)

    @field_validator("operation", mode="before")
    @classmethod
    def parse_operation(cls, v):
        """Accept operation names in any case."""
        return WriteOperationType.from_value(v)

    @field_validator("row_format", mode="before")
    @classmethod
    def parse_row_format(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @classmethod
    def from_options(cls, options: Mapping[str, Any]) -> "WriteConfig":
        """
        Build a config from a flat option map.

        Args:
            options: Option keys to values; non-string values are stringified

        Returns:
            Parsed WriteConfig keeping the full map in ``options``
        """
        raw = {str(key): _stringify(value) for key, value in options.items()}
        return cls.model_validate({**raw, "options": raw})

    @property
    def auto_generate_record_keys(self) -> bool:
        return self.record_key_field is None

    def to_options(self) -> dict[str, str]:
        """Flatten back to option keys; explicit entries in ``options`` win."""
        parsed = self.model_dump(by_alias=True, exclude={"options"}, exclude_none=True)
        flat = {key: _stringify(value) for key, value in parsed.items()}
        flat.update(self.options)
        return flat

    def key_generator_props(self, partition_id: int) -> dict[str, str]:
        """
        Properties handed to the key generator of one partition.

        In auto-generated key mode the partition id and the batch instant are
        added so generated keys are unique across partitions and commits.

        Raises:
            KeyGeneratorConfigError: If keys are auto-generated without an instant time
        """
        props = self.to_options()
        if self.auto_generate_record_keys:
            if not self.instant_time:
                raise KeyGeneratorConfigError(
                    f"'{INSTANT_TIME}' is required when '{RECORDKEY_FIELD}' is not set"
                )
            props[RECORD_KEY_GEN_PARTITION_ID] = str(partition_id)
            props[RECORD_KEY_GEN_INSTANT_TIME] = self.instant_time
        return props

    class Config:
        frozen = True
        populate_by_name = True
        json_schema_extra = {
            "example": {
                OPERATION: "upsert",
                PRECOMBINE_FIELD: "ts",
                KEY_GENERATOR_CLASS: "my_keygens.RegionKeyGenerator",
                RECORDKEY_FIELD: "id",
                INSTANT_TIME: "20251117093000123",
            }
        }
