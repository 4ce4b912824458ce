"""
Core data models for record materialization.

All models use Pydantic for runtime validation and type safety.
"""

from .materialized_record import MaterializedRecord
from .record_key import RecordKey
from .record_location import RecordLocation
from .row_format import RowFormat
from .write_operation import WriteOperationType

__all__ = [
    "RecordKey",
    "RecordLocation",
    "MaterializedRecord",
    "RowFormat",
    "WriteOperationType",
]
