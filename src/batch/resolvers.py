"""
Key and location resolution for rows being materialized.

Prepped rows carry their key and location in reserved metadata fields;
other rows get their key from the configured key generator. Merge-prepared
rows generate keys but may still carry a location.
"""

from typing import Callable

from src.core.errors import KeyResolutionError, MaterializationError
from src.core.keygen import KeyGenerator
from src.core.meta_fields import ReservedField
from src.core.models import RecordKey, RecordLocation
from src.core.rows import BaseRow
from src.storage.file_naming import file_id_from_name


def _non_empty(value, what: str, row: BaseRow) -> str:
    if value is None:
        raise KeyResolutionError(f"{what} is null for {row.row_format.value} row")
    value = str(value)
    if not value:
        raise KeyResolutionError(f"{what} is empty for {row.row_format.value} row")
    return value


def resolve_record_key(
    row: BaseRow,
    is_prepped: bool,
    key_generator: KeyGenerator | None = None,
) -> RecordKey:
    """
    Resolve the record key and partition path of a row.

    Args:
        row: Row being materialized
        is_prepped: Read the key from reserved metadata fields
        key_generator: Generator used when the row is not prepped

    Returns:
        RecordKey with non-empty key and partition path

    Raises:
        KeyResolutionError: If a key part is null or empty, or the generator fails
    """
    if is_prepped:
        record_key = row.reserved_value(ReservedField.RECORD_KEY)
        partition_path = row.reserved_value(ReservedField.PARTITION_PATH)
        return RecordKey(
            record_key=_non_empty(record_key, "Record key metadata field", row),
            partition_path=_non_empty(partition_path, "Partition path metadata field", row),
        )

    if key_generator is None:
        raise KeyResolutionError("A key generator is required for rows that are not prepped")

    try:
        record_key = key_generator.record_key(row, row.schema)
        partition_path = key_generator.partition_path(row, row.schema)
    except MaterializationError:
        raise
    except Exception as e:
        raise KeyResolutionError(
            f"{key_generator.__class__.__name__} failed to generate a key: {e}"
        ) from e

    return RecordKey(
        record_key=_non_empty(record_key, "Generated record key", row),
        partition_path=_non_empty(partition_path, "Generated partition path", row),
    )


def resolve_location(
    row: BaseRow,
    is_prepped: bool,
    sql_merge_into_prepped: bool,
    file_id_extractor: Callable[[str], str] = file_id_from_name,
) -> RecordLocation | None:
    """
    Recover the storage location a row was read from.

    Args:
        row: Row being materialized
        is_prepped: Row carries metadata from a planning pass
        sql_merge_into_prepped: Row is prepared for a merge-style write
        file_id_extractor: Derives the file id from the stored file name

    Returns:
        RecordLocation when both commit time and file name are set, else None
    """
    if not (is_prepped or sql_merge_into_prepped):
        return None

    instant_time = row.reserved_value(ReservedField.COMMIT_TIME)
    file_name = row.reserved_value(ReservedField.FILE_NAME)
    if instant_time is None or file_name is None:
        return None

    return RecordLocation(
        instant_time=str(instant_time),
        file_id=file_id_extractor(str(file_name)),
    )
