"""
Prometheus metrics for record materialization

Counters updated inside partitions live in the Python worker that ran the
partition; driver-side metrics describe batch planning.
"""
import os
from typing import Optional

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

REGISTRY = CollectorRegistry()


# =======================
# RECORD METRICS
# =======================

records_materialized_total = Counter(
    name="materializer_records_materialized_total",
    documentation="Total number of records materialized",
    labelnames=["row_format", "has_location"],  # has_location: true, false
    registry=REGISTRY,
)

records_with_ordering_total = Counter(
    name="materializer_records_with_ordering_total",
    documentation="Records built with an ordering value supplied",
    labelnames=["row_format", "ordering_present"],  # ordering_present: true, false
    registry=REGISTRY,
)

# =======================
# ERROR METRICS
# =======================

metadata_validation_failures_total = Counter(
    name="materializer_metadata_validation_failures_total",
    documentation="Partitions aborted because prepped rows lacked metadata fields",
    labelnames=["row_format"],
    registry=REGISTRY,
)

key_resolution_failures_total = Counter(
    name="materializer_key_resolution_failures_total",
    documentation="Rows whose record key or partition path could not be resolved",
    labelnames=["row_format", "source"],  # source: metadata, key_generator
    registry=REGISTRY,
)

# =======================
# BATCH METRICS
# =======================

batches_planned_total = Counter(
    name="materializer_batches_planned_total",
    documentation="Total number of batches planned for materialization",
    labelnames=["operation", "row_format", "combine"],
    registry=REGISTRY,
)

partition_setup_duration_seconds = Histogram(
    name="materializer_partition_setup_duration_seconds",
    documentation="Time spent on per-partition setup (schemas, key generator, projector)",
    labelnames=["row_format"],
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
    registry=REGISTRY,
)

partition_size_records = Histogram(
    name="materializer_partition_size_records",
    documentation="Number of records materialized per partition",
    labelnames=["row_format"],
    buckets=[10, 100, 1000, 10000, 100000, 1000000],
    registry=REGISTRY,
)


# =======================
# HELPER FUNCTIONS
# =======================

def generate_metrics() -> bytes:
    """Render metrics in Prometheus text format"""
    return generate_latest(REGISTRY)


def get_content_type() -> str:
    return CONTENT_TYPE_LATEST


def start_metrics_server(port: Optional[int] = None) -> None:
    """
    Start HTTP server for Prometheus metrics

    Args:
        port: Port to listen on (defaults to env var METRICS_PORT or 8000)
    """
    # Imported lazily so importing this module never binds a port
    from prometheus_client import start_http_server

    metrics_port = port or int(os.getenv("METRICS_PORT", "8000"))
    start_http_server(metrics_port, registry=REGISTRY)


def increment_counter(counter: Counter, value: float = 1.0, **labels) -> None:
    counter.labels(**labels).inc(value)


def observe_histogram(histogram: Histogram, value: float, **labels) -> None:
    histogram.labels(**labels).observe(value)


def _flag(value: bool) -> str:
    return "true" if value else "false"


def record_partition_materialized(
    row_format: str,
    total_records: int,
    located_records: int,
    ordered_records: int,
    ordering_present: int,
) -> None:
    """
    Record the outcome of a fully materialized partition.

    Args:
        row_format: Row representation of the partition
        total_records: Records emitted
        located_records: Records carrying a known storage location
        ordered_records: Records built with an ordering value supplied
        ordering_present: Of those, records whose ordering value was found
    """
    increment_counter(records_materialized_total, located_records,
                      row_format=row_format, has_location=_flag(True))
    increment_counter(records_materialized_total, total_records - located_records,
                      row_format=row_format, has_location=_flag(False))
    if ordered_records:
        increment_counter(records_with_ordering_total, ordering_present,
                          row_format=row_format, ordering_present=_flag(True))
        increment_counter(records_with_ordering_total, ordered_records - ordering_present,
                          row_format=row_format, ordering_present=_flag(False))
    observe_histogram(partition_size_records, total_records, row_format=row_format)


def record_batch_planned(operation: str, row_format: str, combine: bool) -> None:
    increment_counter(batches_planned_total, 1, operation=operation,
                      row_format=row_format, combine=_flag(combine))
