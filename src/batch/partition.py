"""
Per-partition record materialization.

One PartitionMaterializer handles one partition: it parses the shipped
schemas, builds the key generator and projector on first access to the row
stream, validates prepped rows once, then turns rows into records in input
order.
"""

import time
from typing import Any, Callable, Iterable, Iterator

from src.core.config import WriteConfig
from src.core.errors import KeyResolutionError, MissingMetadataFieldsError
from src.core.keygen import KeyGenerator, create_key_generator, resolve_key_generator_class
from src.core.meta_fields import validate_meta_fields
from src.core.models import MaterializedRecord
from src.core.rows import BaseRow, create_row_source
from src.core.schema import SchemaProjector, SerializedSchemas
from src.observability import metrics
from src.observability.logger import PartitionLogger, get_logger
from src.storage.file_naming import file_id_from_name

from .ordering import OrderingSelector
from .record_builder import create_record, create_record_with_ordering
from .resolvers import resolve_location, resolve_record_key

logger = get_logger(__name__)


class PartitionMaterializer:
    """
    Materializes the rows of a single partition.

    State is local to the instance: nothing is shared with other partitions,
    which may run concurrently in other workers.
    """

    def __init__(
        self,
        config: WriteConfig,
        schemas: SerializedSchemas,
        partition_id: int,
        combine: bool,
        key_generator_class: type[KeyGenerator] | None = None,
        file_id_extractor: Callable[[str], str] = file_id_from_name,
    ):
        """
        Initialize partition materializer.

        Args:
            config: Write options of the batch
            schemas: Serialized source, writer and data-file schemas
            partition_id: Index of the partition
            combine: Batch-level decision to build records with ordering values
            key_generator_class: Key generator for rows that are not prepped;
                resolved from config when omitted
            file_id_extractor: Derives file ids from stored file names
        """
        self.config = config
        self.schemas = schemas
        self.partition_id = partition_id
        self.combine = combine
        self.key_generator_class = key_generator_class
        self.file_id_extractor = file_id_extractor

        self.row_format = config.row_format.value
        self.strip_meta_fields = config.is_prepped or config.sql_merge_into_prepped
        self.row_source = None
        self.key_generator: KeyGenerator | None = None
        self.projector: SchemaProjector | None = None
        self.ordering: OrderingSelector | None = None
        self.validated = False
        self.validation_checks = 0
        self.log = PartitionLogger(logger, partition_id, self.row_format)

    def _setup(self) -> None:
        """Parse schemas and build partition-scoped collaborators."""
        start = time.perf_counter()
        parsed = self.schemas.parse()

        self.row_source = create_row_source(self.config.row_format, parsed.source, parsed.writer)

        if not self.config.is_prepped:
            generator_class = self.key_generator_class or resolve_key_generator_class(
                self.config.key_generator_class
            )
            self.key_generator = create_key_generator(
                generator_class,
                self.config.key_generator_props(self.partition_id),
            )

        self.projector = SchemaProjector.for_write(
            writer_schema=parsed.writer,
            data_file_schema=parsed.data_file,
            drop_partition_columns=self.config.drop_partition_columns,
            strip_meta_fields=self.strip_meta_fields,
        )

        if self.combine:
            self.ordering = OrderingSelector(
                self.config.precombine_field,
                self.config.consistent_logical_timestamp,
            )

        metrics.observe_histogram(
            metrics.partition_setup_duration_seconds,
            time.perf_counter() - start,
            row_format=self.row_format,
        )
        self.log.debug(
            f"Partition {self.partition_id} ready: payload fields {self.projector.field_names}",
            extra={"key_generator": repr(self.key_generator), "combine": self.combine},
        )

    def validate(self, row: BaseRow) -> None:
        """
        Check the first prepped row of the partition for metadata fields.

        The schema is uniform across a partition, so one check covers every
        row. Later calls are no-ops.

        Raises:
            MissingMetadataFieldsError: If reserved fields are absent
        """
        if self.validated:
            return
        self.validation_checks += 1
        try:
            validate_meta_fields(row.field_names(), self.row_format)
        except MissingMetadataFieldsError as e:
            metrics.increment_counter(
                metrics.metadata_validation_failures_total, row_format=self.row_format
            )
            self.log.error(
                f"Partition {self.partition_id} aborted: {e}",
                extra={"missing_fields": e.missing_fields},
            )
            raise
        self.validated = True

    def materialize_row(self, row: BaseRow) -> MaterializedRecord:
        """
        Turn one row into a record.

        Args:
            row: Wrapped input row

        Returns:
            MaterializedRecord for the row

        Raises:
            KeyResolutionError: If the key cannot be resolved
        """
        try:
            key = resolve_record_key(row, self.config.is_prepped, self.key_generator)
        except KeyResolutionError:
            source = "metadata" if self.config.is_prepped else "key_generator"
            metrics.increment_counter(
                metrics.key_resolution_failures_total, row_format=self.row_format, source=source
            )
            raise

        location = resolve_location(
            row,
            self.config.is_prepped,
            self.config.sql_merge_into_prepped,
            self.file_id_extractor,
        )
        payload = self.projector.project(row)

        if self.ordering is not None:
            return create_record_with_ordering(
                key, payload, self.ordering.select(row), self.config.payload_class, location
            )
        return create_record(key, payload, self.config.payload_class, location)

    def materialize(self, rows: Iterable[Any]) -> Iterator[MaterializedRecord]:
        """
        Lazily materialize the rows of the partition, in order.

        Setup runs when the first record is requested.

        Args:
            rows: Raw rows (pyspark Rows, mappings or tuples depending on row format)

        Yields:
            One MaterializedRecord per input row
        """
        self._setup()
        total = located = ordered = ordering_present = 0

        for row in self.row_source.rows(rows):
            if self.config.is_prepped and not self.validated:
                self.validate(row)

            record = self.materialize_row(row)
            total += 1
            if record.current_location is not None:
                located += 1
            if record.ordering_supplied:
                ordered += 1
                if record.ordering_value is not None:
                    ordering_present += 1
            yield record

        metrics.record_partition_materialized(
            self.row_format, total, located, ordered, ordering_present
        )
        self.log.debug(
            f"Partition {self.partition_id} materialized {total} records",
            extra={"records": total, "located": located},
        )
