"""
WriteOperationType enumerating the write operations of the storage engine.
"""

from enum import Enum


class WriteOperationType(str, Enum):
    """
    Write operation kinds understood by the storage engine's write path.

    Only the insert/upsert classification matters for materialization;
    every other kind falls through to the default combine policy.
    """

    INSERT = "insert"
    INSERT_PREPPED = "insert_prepped"
    UPSERT = "upsert"
    UPSERT_PREPPED = "upsert_prepped"
    BULK_INSERT = "bulk_insert"
    BULK_INSERT_PREPPED = "bulk_insert_prepped"
    DELETE = "delete"
    DELETE_PREPPED = "delete_prepped"
    INSERT_OVERWRITE = "insert_overwrite"
    INSERT_OVERWRITE_TABLE = "insert_overwrite_table"
    DELETE_PARTITION = "delete_partition"

    @classmethod
    def from_value(cls, value: "str | WriteOperationType") -> "WriteOperationType":
        """Parse an operation name, case-insensitively."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown write operation: {value}") from None

    @property
    def is_insert(self) -> bool:
        return self in _INSERT_OPERATIONS

    @property
    def is_upsert(self) -> bool:
        return self in (WriteOperationType.UPSERT, WriteOperationType.UPSERT_PREPPED)

    @property
    def is_prepped_operation(self) -> bool:
        return self.value.endswith("_prepped")


_INSERT_OPERATIONS = frozenset({
    WriteOperationType.INSERT,
    WriteOperationType.INSERT_PREPPED,
    WriteOperationType.BULK_INSERT,
    WriteOperationType.BULK_INSERT_PREPPED,
    WriteOperationType.INSERT_OVERWRITE,
    WriteOperationType.INSERT_OVERWRITE_TABLE,
})
