"""
Spark batch record materialization.
"""

from .ordering import OrderingSelector, should_combine
from .partition import PartitionMaterializer
from .pipeline import RecordMaterializer
from .record_builder import create_record, create_record_with_ordering
from .resolvers import resolve_location, resolve_record_key

__all__ = [
    "RecordMaterializer",
    "PartitionMaterializer",
    "OrderingSelector",
    "should_combine",
    "create_record",
    "create_record_with_ordering",
    "resolve_location",
    "resolve_record_key",
]
