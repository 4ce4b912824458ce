"""
Batch record materialization.

Coordinates the flow: resolve batch policy → ship schemas → per partition
(resolve key → resolve location → project → select ordering → build record)
"""

from typing import Any, Callable, Iterable, Iterator, Optional

from pyspark import RDD
from pyspark.sql import DataFrame
from pyspark.sql.types import StructType

from src.core.config import WriteConfig
from src.core.keygen import KeyGenerator, resolve_key_generator_class
from src.core.models import MaterializedRecord
from src.core.schema import SerializedSchemas
from src.observability import metrics
from src.observability.logger import get_logger, log_operation
from src.storage.file_naming import file_id_from_name

from .ordering import should_combine
from .partition import PartitionMaterializer

logger = get_logger(__name__)

PartitionFunction = Callable[[int, Iterable[Any]], Iterator[MaterializedRecord]]


class RecordMaterializer:
    """
    Turns a batch of rows into keyed records for the write path.

    Flow:
    1. Decide the combine policy once for the batch
    2. Resolve the key generator class (rows that are not prepped)
    3. Serialize the source, writer and data-file schemas
    4. Materialize every partition independently, preserving row order
    """

    def __init__(
        self,
        config: WriteConfig,
        writer_schema: StructType,
        data_file_schema: Optional[StructType] = None,
        file_id_extractor: Callable[[str], str] = file_id_from_name,
    ):
        """
        Initialize record materializer.

        Args:
            config: Write options of the batch
            writer_schema: Schema rows are written with (includes reserved fields for prepped rows)
            data_file_schema: Persisted schema, defaults to the writer schema
            file_id_extractor: Derives file ids from stored file names
        """
        self.config = config
        self.writer_schema = writer_schema
        self.data_file_schema = data_file_schema if data_file_schema is not None else writer_schema
        self.file_id_extractor = file_id_extractor
        self.should_combine = should_combine(config)

    def _key_generator_class(self) -> Optional[type[KeyGenerator]]:
        if self.config.is_prepped:
            return None
        generator_class = resolve_key_generator_class(self.config.key_generator_class)
        # Fail on the driver when auto-generated keys lack an instant time
        self.config.key_generator_props(partition_id=0)
        return generator_class

    def partition_function(self, source_schema: StructType) -> PartitionFunction:
        """
        Build the function applied to each partition.

        The returned closure captures only immutable, picklable values so it
        can be shipped to executors.

        Args:
            source_schema: Schema of the incoming rows

        Returns:
            Function of (partition_id, rows) yielding MaterializedRecords
        """
        config = self.config
        combine = self.should_combine
        key_generator_class = self._key_generator_class()
        schemas = SerializedSchemas.from_schemas(source_schema, self.writer_schema, self.data_file_schema)
        file_id_extractor = self.file_id_extractor

        def materialize_partition(partition_id: int, rows: Iterable[Any]) -> Iterator[MaterializedRecord]:
            materializer = PartitionMaterializer(
                config=config,
                schemas=schemas,
                partition_id=partition_id,
                combine=combine,
                key_generator_class=key_generator_class,
                file_id_extractor=file_id_extractor,
            )
            return materializer.materialize(rows)

        return materialize_partition

    def materialize(self, df: DataFrame) -> RDD:
        """
        Materialize a DataFrame into an RDD of records.

        Args:
            df: Input rows

        Returns:
            RDD[MaterializedRecord], partitioned like the input
        """
        operation = self.config.operation.value
        row_format = self.config.row_format.value

        with log_operation(
            "Planning record materialization",
            logger=logger,
            write_operation=operation,
            row_format=row_format,
            prepped=self.config.is_prepped,
            sql_merge_into_prepped=self.config.sql_merge_into_prepped,
            combine=self.should_combine,
        ):
            materialize_partition = self.partition_function(df.schema)
            records = df.rdd.mapPartitionsWithIndex(materialize_partition, preservesPartitioning=True)

        metrics.record_batch_planned(operation, row_format, self.should_combine)
        return records

    def materialize_rows(
        self,
        rows: Iterable[Any],
        source_schema: StructType,
        partition_id: int = 0,
    ) -> Iterator[MaterializedRecord]:
        """
        Materialize rows of a single partition without Spark.

        Args:
            rows: Raw rows (mappings or pyspark Rows for self-describing, tuples for columnar)
            source_schema: Schema of the incoming rows
            partition_id: Partition index handed to the key generator

        Returns:
            Lazy iterator of MaterializedRecords
        """
        return self.partition_function(source_schema)(partition_id, rows)
