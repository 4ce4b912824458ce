"""
MaterializedRecord model handed to the write path (ephemeral).
"""

from typing import Any

from pydantic import BaseModel, Field

from .record_key import RecordKey
from .record_location import RecordLocation


class MaterializedRecord(BaseModel):
    """
    A keyed record ready for the write path.

    Note: ordering_supplied distinguishes records built without an ordering
    value from records whose ordering lookup came back empty. Downstream
    combine logic treats the two differently.

    Attributes:
        key: Record key and partition path
        payload: Projected row data (a fresh copy, never the input row)
        payload_class: Opaque payload class identifier forwarded to the engine
        ordering_value: Precombine value, None when absent
        ordering_supplied: Whether the record was built with an ordering value
        current_location: Where the record already lives on storage, if known
    """

    key: RecordKey
    payload: dict[str, Any]
    payload_class: str = Field(..., min_length=1)
    ordering_value: Any = None
    ordering_supplied: bool = False
    current_location: RecordLocation | None = None

    @property
    def record_key(self) -> str:
        return self.key.record_key

    @property
    def partition_path(self) -> str:
        return self.key.partition_path

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "key": {"record_key": "id:42", "partition_path": "region=emea"},
                "payload": {"id": 42, "ts": 1700000000, "value": 9.5},
                "payload_class": "org.apache.hudi.common.model.OverwriteWithLatestAvroPayload",
                "ordering_value": 1700000000,
                "ordering_supplied": True,
                "current_location": {
                    "instant_time": "20251117093000123",
                    "file_id": "5f1c2a8e-7d0b-4c1e-9a57-3b2d7f0e6c11-0",
                },
            }
        }
