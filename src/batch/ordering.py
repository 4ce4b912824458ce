"""
Combine policy and precombine (ordering) value selection.

The combine decision is made once per batch. When it holds, every record is
built with the value of the precombine field so the combine stage can pick
the latest version of duplicate keys.
"""

from datetime import date, datetime, timezone
from typing import Any, Mapping

from src.core.config import WriteConfig
from src.core.rows import BaseRow

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_EPOCH_DATE = date(1970, 1, 1)


def should_combine(config: WriteConfig) -> bool:
    """
    Decide whether records of a batch carry ordering values.

    Insert-class operations combine when duplicates are dropped or combine
    before insert is enabled, upsert-class operations when combine before
    upsert is enabled. Prepped batches and other operations combine only
    when they are not prepped.

    Args:
        config: Write options of the batch

    Returns:
        True when records should be built with an ordering value
    """
    if not config.is_prepped and config.operation.is_insert:
        return config.insert_drop_duplicates or config.combine_before_insert
    if not config.is_prepped and config.operation.is_upsert:
        return config.combine_before_upsert
    return not config.is_prepped


def _child(container: Any, name: str) -> Any:
    if isinstance(container, Mapping):
        return container.get(name)
    if hasattr(container, "asDict"):
        return container.asDict().get(name)
    return None


def to_epoch_micros(value: datetime) -> int:
    """
    Convert a datetime to epoch microseconds.

    Naive values are wall-clock times in the worker's local zone, the way
    pyspark returns TimestampType columns; fold picks the instant in a
    repeated DST hour.
    """
    delta = value.astimezone(timezone.utc) - _EPOCH
    return (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds


class OrderingSelector:
    """
    Extracts the precombine value of a row.

    The field may be a dotted path into nested structs. A missing field or
    a null anywhere along the path yields None.
    """

    def __init__(self, field_name: str, consistent_logical_timestamp: bool = False):
        """
        Initialize selector.

        Args:
            field_name: Precombine field, e.g. "ts" or "meta.updated_at"
            consistent_logical_timestamp: Return timestamps and dates as epoch integers
        """
        self.field_name = field_name
        self.path = field_name.split(".")
        self.consistent_logical_timestamp = consistent_logical_timestamp

    def select(self, row: BaseRow) -> Any:
        """
        Read the ordering value of a row.

        Args:
            row: Row being materialized (before projection)

        Returns:
            The comparable ordering value, or None when absent
        """
        value = row.get(self.path[0])
        for name in self.path[1:]:
            if value is None:
                return None
            value = _child(value, name)
        if value is None:
            return None
        return self._normalize(value)

    def _normalize(self, value: Any) -> Any:
        if not self.consistent_logical_timestamp:
            return value
        # datetime is a date subclass, check it first
        if isinstance(value, datetime):
            return to_epoch_micros(value)
        if isinstance(value, date):
            return (value - _EPOCH_DATE).days
        return value
