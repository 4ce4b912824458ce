"""
RecordLocation model pointing at the file holding a record's prior version.
"""

from pydantic import BaseModel


class RecordLocation(BaseModel):
    """
    Known storage location of a record.

    Attributes:
        instant_time: Commit token of the write that produced the file
        file_id: File group identifier derived from the stored file name
    """

    instant_time: str
    file_id: str

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "instant_time": "20251117093000123",
                "file_id": "5f1c2a8e-7d0b-4c1e-9a57-3b2d7f0e6c11-0",
            }
        }
