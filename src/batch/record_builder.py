"""
Assembly of materialized records.

Two forms exist on purpose: records built without an ordering value use the
payload's natural ordering downstream, records built with one (even a null
one) are ranked by it.
"""

from typing import Any

from src.core.models import MaterializedRecord, RecordKey, RecordLocation


def create_record(
    key: RecordKey,
    payload: dict[str, Any],
    payload_class: str,
    location: RecordLocation | None = None,
) -> MaterializedRecord:
    """Build a record without an ordering value."""
    return MaterializedRecord(
        key=key,
        payload=payload,
        payload_class=payload_class,
        current_location=location,
    )


def create_record_with_ordering(
    key: RecordKey,
    payload: dict[str, Any],
    ordering_value: Any,
    payload_class: str,
    location: RecordLocation | None = None,
) -> MaterializedRecord:
    """
    Build a record ranked by an ordering value.

    Args:
        key: Resolved record key
        payload: Projected payload
        ordering_value: Precombine value, None when the lookup found nothing
        payload_class: Opaque payload class identifier
        location: Known storage location, attached as the current location

    Returns:
        MaterializedRecord with ordering_supplied set
    """
    return MaterializedRecord(
        key=key,
        payload=payload,
        payload_class=payload_class,
        ordering_value=ordering_value,
        ordering_supplied=True,
        current_location=location,
    )
