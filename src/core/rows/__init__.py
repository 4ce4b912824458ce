"""
Row representations and the sources that produce them.
"""

from .base_row import BaseRow
from .columnar_row import ColumnarRow
from .row_source import (
    ColumnarRowSource,
    RowSource,
    SelfDescribingRowSource,
    create_row_source,
)
from .self_describing_row import SelfDescribingRow

__all__ = [
    "BaseRow",
    "ColumnarRow",
    "SelfDescribingRow",
    "RowSource",
    "ColumnarRowSource",
    "SelfDescribingRowSource",
    "create_row_source",
]
