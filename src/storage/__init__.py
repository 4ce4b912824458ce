"""
Storage engine conventions consumed by the materializer.
"""

from .file_naming import file_id_from_name

__all__ = [
    "file_id_from_name",
]
