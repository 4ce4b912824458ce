"""
Reserved metadata fields carried by prepped rows.

The storage engine writes five metadata columns in front of every stored row.
Rows coming back from a planning pass (prepped rows) still carry them, and
the materializer reads keys and locations out of them instead of generating
new ones.
"""

from enum import Enum
from typing import Iterable

from src.core.errors import MissingMetadataFieldsError

OPERATION_METADATA_FIELD = "_hoodie_operation"
OPERATION_METADATA_FIELD_POS = 5


class ReservedField(Enum):
    """Reserved metadata columns with their canonical columnar positions."""

    COMMIT_TIME = ("_hoodie_commit_time", 0)
    COMMIT_SEQNO = ("_hoodie_commit_seqno", 1)
    RECORD_KEY = ("_hoodie_record_key", 2)
    PARTITION_PATH = ("_hoodie_partition_path", 3)
    FILE_NAME = ("_hoodie_file_name", 4)

    def __init__(self, column_name: str, position: int):
        self.column_name = column_name
        self.position = position


RESERVED_FIELD_NAMES = tuple(field.column_name for field in ReservedField)

# Columns removed from payloads of prepped and merge-prepared rows
META_COLUMNS_WITH_OPERATION = frozenset(RESERVED_FIELD_NAMES + (OPERATION_METADATA_FIELD,))


def missing_meta_fields(field_names: Iterable[str]) -> list[str]:
    """Return reserved field names absent from field_names, in canonical order."""
    present = set(field_names)
    return [name for name in RESERVED_FIELD_NAMES if name not in present]


def validate_meta_fields(field_names: Iterable[str], row_format: str) -> None:
    """
    Check that a prepped row's schema declares every reserved field.

    Args:
        field_names: Field names of the row's schema
        row_format: Row representation in use, reported in the error

    Raises:
        MissingMetadataFieldsError: If any reserved field is absent
    """
    missing = missing_meta_fields(field_names)
    if missing:
        raise MissingMetadataFieldsError(missing, row_format)


def is_meta_field(name: str) -> bool:
    return name in META_COLUMNS_WITH_OPERATION
