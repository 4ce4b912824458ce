"""
Integration tests for RecordMaterializer on a local Spark session.

Tests the complete flow: DataFrame → mapPartitionsWithIndex → records
collected on the driver.
"""

import pytest
from pyspark.sql.types import StructType

from src.batch import RecordMaterializer
from src.core.config import WriteConfigBuilder
from src.core.models import MaterializedRecord
from src.core.meta_fields import RESERVED_FIELD_NAMES

KEYGEN = "key_generators.FieldKeyGenerator"
INSTANT = "20251117093000123"
BASE_FILE = "5f1c2a8e-0_1-0-1_20251117093000123.parquet"


@pytest.fixture
def data_df(spark_session, data_schema):
    rows = [
        (1, 5, "emea", 1.0),
        (2, 3, "apac", 2.0),
        (3, 8, "emea", 3.0),
        (4, None, "amer", 4.0),
    ]
    return spark_session.createDataFrame(spark_session.sparkContext.parallelize(rows, 2), data_schema)


@pytest.fixture
def prepped_df(spark_session, prepped_schema):
    rows = [
        (INSTANT, f"{INSTANT}_0_{i}", str(i), "region=emea", BASE_FILE if i % 2 else None, i, 100 + i, "emea", 1.5)
        for i in range(6)
    ]
    return spark_session.createDataFrame(spark_session.sparkContext.parallelize(rows, 3), prepped_schema)


@pytest.mark.integration
class TestSparkMaterialization:
    """Materialization across Spark partitions"""

    def test_self_describing_upsert(self, data_df, data_schema, data_file_schema):
        config = (
            WriteConfigBuilder()
            .operation("upsert")
            .key_generator(KEYGEN, "id")
            .drop_partition_columns()
            .build_config()
        )

        records = RecordMaterializer(config, data_schema, data_file_schema).materialize(data_df)
        collected = records.collect()

        assert records.getNumPartitions() == 2
        assert all(isinstance(r, MaterializedRecord) for r in collected)
        assert [r.record_key for r in collected] == ["1", "2", "3", "4"]
        assert [r.partition_path for r in collected] == ["region=emea", "region=apac", "region=emea", "region=amer"]
        assert [r.ordering_value for r in collected] == [5, 3, 8, None]
        assert all(r.ordering_supplied for r in collected)
        assert all(list(r.payload) == ["id", "ts", "value"] for r in collected)

    def test_columnar_prepped_with_locations(self, prepped_df, prepped_schema):
        config = (
            WriteConfigBuilder()
            .operation("upsert_prepped")
            .prepped()
            .row_format("columnar")
            .build_config()
        )

        collected = RecordMaterializer(config, prepped_schema).materialize(prepped_df).collect()

        assert [r.record_key for r in collected] == [str(i) for i in range(6)]
        located = [r for r in collected if r.current_location is not None]
        assert [r.record_key for r in located] == ["1", "3", "5"]
        assert {r.current_location.file_id for r in located} == {"5f1c2a8e-0"}
        assert all(not set(RESERVED_FIELD_NAMES) & set(r.payload) for r in collected)
        assert all(r.ordering_supplied is False for r in collected)

    def test_auto_keys_carry_partition_index(self, data_df, data_schema):
        config = (
            WriteConfigBuilder()
            .operation("insert")
            .key_generator(KEYGEN)
            .instant_time("001")
            .build_config()
        )

        partitions = RecordMaterializer(config, data_schema).materialize(data_df).glom().collect()

        for partition_id, records in enumerate(partitions):
            assert [r.record_key for r in records] == [f"001_{partition_id}_{seq}" for seq in range(len(records))]

    def test_missing_metadata_aborts_job(self, spark_session, prepped_schema):
        schema = StructType([f for f in prepped_schema.fields if f.name != "_hoodie_file_name"])
        df = spark_session.createDataFrame(
            [(INSTANT, f"{INSTANT}_0_0", "0", "region=emea", 0, 100, "emea", 1.5)], schema
        )
        config = WriteConfigBuilder().operation("upsert_prepped").prepped().build_config()

        records = RecordMaterializer(config, schema).materialize(df)

        with pytest.raises(Exception, match="Metadata fields missing"):
            records.collect()
