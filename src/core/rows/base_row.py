"""
Base row interface shared by both row representations.

Rows are read through one contract, by field name or by position, so the
resolvers, projector and ordering selector never branch on representation.
"""

from abc import ABC, abstractmethod
from typing import Any

from pyspark.sql.types import StructType

from src.core.meta_fields import ReservedField
from src.core.models import RowFormat

_MISSING = object()


class BaseRow(ABC):
    """
    Abstract read-only view over one input row.

    Subclasses hold the row's values; the schema is shared by every row of
    a partition and must not be mutated.
    """

    row_format: RowFormat

    def __init__(self, schema: StructType):
        self.schema = schema

    @abstractmethod
    def field_value(self, key: str | int) -> Any:
        """
        Read a field by name or by position in the row's schema.

        Raises:
            KeyError: If no field has that name
            IndexError: If the position is outside the schema
        """
        pass

    @abstractmethod
    def has_field(self, name: str) -> bool:
        pass

    @abstractmethod
    def reserved_value(self, field: ReservedField) -> Any:
        """Read a reserved metadata field, None when absent or null."""
        pass

    @abstractmethod
    def field_names(self) -> list[str]:
        pass

    def get(self, name: str, default: Any = None) -> Any:
        value = self.field_value(name) if self.has_field(name) else _MISSING
        return default if value is _MISSING else value

    def as_dict(self) -> dict[str, Any]:
        return {name: self.field_value(name) for name in self.field_names()}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.as_dict()!r})"
