"""
Unit tests for reserved metadata field definitions and validation.
"""

import pytest

from src.core.errors import MaterializationError, MissingMetadataFieldsError
from src.core.meta_fields import (
    OPERATION_METADATA_FIELD,
    RESERVED_FIELD_NAMES,
    ReservedField,
    is_meta_field,
    missing_meta_fields,
    validate_meta_fields,
)


def test_reserved_fields_have_canonical_positions():
    """Test the fixed columnar layout of the metadata columns"""
    assert [(f.column_name, f.position) for f in ReservedField] == [
        ("_hoodie_commit_time", 0),
        ("_hoodie_commit_seqno", 1),
        ("_hoodie_record_key", 2),
        ("_hoodie_partition_path", 3),
        ("_hoodie_file_name", 4),
    ]
    assert RESERVED_FIELD_NAMES == tuple(f.column_name for f in ReservedField)


def test_validate_passes_with_all_fields():
    validate_meta_fields(list(RESERVED_FIELD_NAMES) + ["id"], "self_describing")


def test_missing_fields_listed_in_canonical_order():
    names = ["id", "_hoodie_record_key", "_hoodie_commit_time"]
    assert missing_meta_fields(names) == [
        "_hoodie_commit_seqno",
        "_hoodie_partition_path",
        "_hoodie_file_name",
    ]


def test_validate_raises_with_missing_field_names():
    """Test that the error names every missing field and the row path"""
    names = [n for n in RESERVED_FIELD_NAMES if n != "_hoodie_file_name"]

    with pytest.raises(MissingMetadataFieldsError) as exc_info:
        validate_meta_fields(names, "self_describing")

    assert exc_info.value.missing_fields == ["_hoodie_file_name"]
    assert exc_info.value.row_format == "self_describing"
    assert "_hoodie_file_name" in str(exc_info.value)
    assert "self-describing" in str(exc_info.value)
    assert isinstance(exc_info.value, MaterializationError)


def test_validate_reports_columnar_path():
    with pytest.raises(MissingMetadataFieldsError, match="columnar"):
        validate_meta_fields(["id"], "columnar")


def test_operation_column_is_meta_but_not_required():
    assert is_meta_field(OPERATION_METADATA_FIELD)
    assert OPERATION_METADATA_FIELD not in RESERVED_FIELD_NAMES
    assert not is_meta_field("id")
