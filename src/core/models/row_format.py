"""
RowFormat selecting which row representation a batch is materialized from.
"""

from enum import Enum


class RowFormat(str, Enum):
    """
    Row representations a batch can be read as.

    SELF_DESCRIBING rows carry their own field-name -> value mapping,
    COLUMNAR rows are positional tuples against a shared schema.
    """

    SELF_DESCRIBING = "self_describing"
    COLUMNAR = "columnar"
