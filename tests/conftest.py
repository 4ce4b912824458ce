"""
Pytest configuration and fixtures for record materializer tests

This module provides shared fixtures for unit, integration, and E2E tests.
"""
import os
import pytest
from typing import Generator
from pyspark.sql import SparkSession
from pyspark.sql.types import DoubleType, LongType, StringType, StructField, StructType

from key_generators import FieldKeyGenerator
from src.core.meta_fields import RESERVED_FIELD_NAMES

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
TESTS_DIR = os.path.dirname(os.path.abspath(__file__))


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require Spark"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that run a local Spark session"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end materialization scenarios"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take more than 5 seconds to run"
    )


# =======================
# SPARK FIXTURES
# =======================

@pytest.fixture(scope="session")
def spark_session() -> Generator[SparkSession, None, None]:
    """
    Create a Spark session for testing with local mode

    Python workers must import both the package and the test key generators,
    so the project root and tests directory are put on PYTHONPATH before the
    JVM starts.

    Yields:
        SparkSession configured for local testing
    """
    python_path = [PROJECT_ROOT, TESTS_DIR]
    if os.environ.get("PYTHONPATH"):
        python_path.append(os.environ["PYTHONPATH"])
    os.environ["PYTHONPATH"] = os.pathsep.join(python_path)

    spark = (
        SparkSession.builder
        .appName("record-materializer-test")
        .master("local[2]")
        .config("spark.sql.shuffle.partitions", "2")
        .config("spark.driver.memory", "1g")
        .config("spark.ui.enabled", "false")  # Disable UI for tests
        .config("spark.sql.warehouse.dir", "/tmp/spark-warehouse")
        .getOrCreate()
    )

    # Set log level to WARN to reduce test output noise
    spark.sparkContext.setLogLevel("WARN")

    yield spark

    spark.stop()


# =======================
# SCHEMA FIXTURES
# =======================

@pytest.fixture(scope="session")
def data_schema() -> StructType:
    """Business columns of the test table; "region" is the partition column"""
    return StructType([
        StructField("id", LongType(), False),
        StructField("ts", LongType(), True),
        StructField("region", StringType(), True),
        StructField("value", DoubleType(), True),
    ])


@pytest.fixture(scope="session")
def data_file_schema(data_schema) -> StructType:
    """Persisted shape when partition columns are dropped"""
    return StructType([f for f in data_schema.fields if f.name != "region"])


@pytest.fixture(scope="session")
def prepped_schema(data_schema) -> StructType:
    """Reserved metadata columns in canonical order followed by business columns"""
    meta = [StructField(name, StringType(), True) for name in RESERVED_FIELD_NAMES]
    return StructType(meta + list(data_schema.fields))


# =======================
# KEY GENERATOR FIXTURES
# =======================

@pytest.fixture(autouse=True)
def reset_key_generators():
    """Forget key generator instances created by earlier tests"""
    FieldKeyGenerator.instances.clear()
    yield
    FieldKeyGenerator.instances.clear()


# =======================
# FILE FIXTURES
# =======================

@pytest.fixture(scope="session")
def test_data_dir() -> str:
    """
    Get path to test data fixtures directory

    Returns:
        Path to tests/fixtures directory
    """
    return os.path.join(TESTS_DIR, "fixtures")
