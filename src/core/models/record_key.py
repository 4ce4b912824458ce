"""
RecordKey model identifying a record within the table.
"""

from pydantic import BaseModel, Field


class RecordKey(BaseModel):
    """
    Unique key of a record: record key plus partition path.

    Attributes:
        record_key: Key of the record within its partition
        partition_path: Logical placement of the record in the table layout
    """

    record_key: str = Field(..., min_length=1)
    partition_path: str = Field(..., min_length=1)

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "record_key": "id:42",
                "partition_path": "region=emea",
            }
        }
