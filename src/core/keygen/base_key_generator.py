"""
Key generator interface consumed by the materializer.

Key generation algorithms live outside this package. Implementations
subclass KeyGenerator and are selected by configuration; one instance is
built per partition from the write options.
"""

from abc import ABC, abstractmethod
from typing import Mapping

from pyspark.sql.types import StructType

from src.core.config.write_config import (
    RECORD_KEY_GEN_INSTANT_TIME,
    RECORD_KEY_GEN_PARTITION_ID,
)
from src.core.rows import BaseRow


class KeyGenerator(ABC):
    """
    Abstract base class for key generators.

    Each implementation derives a record key and a partition path from a
    row. Both operations must return non-empty strings or raise.
    """

    def __init__(self, props: Mapping[str, str]):
        """
        Initialize key generator.

        Args:
            props: Write options, plus the auto-key properties when keys are generated
        """
        self.props = dict(props)

    @abstractmethod
    def record_key(self, row: BaseRow, schema: StructType) -> str:
        """
        Derive the record key of a row.

        Args:
            row: The row being materialized
            schema: Schema the row is read against

        Returns:
            Record key
        """
        pass

    @abstractmethod
    def partition_path(self, row: BaseRow, schema: StructType) -> str:
        """
        Derive the partition path of a row.

        Args:
            row: The row being materialized
            schema: Schema the row is read against

        Returns:
            Partition path
        """
        pass

    @property
    def partition_id(self) -> int | None:
        """Partition index injected for auto-generated keys."""
        value = self.props.get(RECORD_KEY_GEN_PARTITION_ID)
        return int(value) if value is not None else None

    @property
    def instant_time(self) -> str | None:
        """Batch instant injected for auto-generated keys."""
        return self.props.get(RECORD_KEY_GEN_INSTANT_TIME)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(partition_id={self.partition_id})"
