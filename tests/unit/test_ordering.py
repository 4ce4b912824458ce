"""
Unit tests for the combine policy and ordering value selection.
"""

import os
import time
from datetime import date, datetime, timedelta, timezone

import pytest
from pyspark.sql.types import DateType, LongType, StringType, StructField, StructType, TimestampType

from src.batch.ordering import OrderingSelector, should_combine, to_epoch_micros
from src.core.config import WriteConfig
from src.core.rows import ColumnarRowSource, SelfDescribingRowSource


class TestShouldCombine:
    """Tests for the batch-level combine decision"""

    @pytest.mark.parametrize("operation,prepped,drop_dups,combine_insert,combine_upsert,expected", [
        ("insert", False, False, False, True, False),
        ("insert", False, True, False, True, True),
        ("insert", False, False, True, True, True),
        ("bulk_insert", False, True, False, True, True),
        ("insert_overwrite", False, False, False, True, False),
        ("upsert", False, False, False, True, True),
        ("upsert", False, False, False, False, False),
        ("upsert_prepped", False, False, False, False, False),
        ("delete", False, False, False, False, True),
        ("insert", True, True, True, True, False),
        ("upsert", True, False, False, True, False),
        ("delete", True, False, False, True, False),
    ])
    def test_policy(self, operation, prepped, drop_dups, combine_insert, combine_upsert, expected):
        config = WriteConfig(
            operation=operation,
            is_prepped=prepped,
            insert_drop_duplicates=drop_dups,
            combine_before_insert=combine_insert,
            combine_before_upsert=combine_upsert,
        )
        assert should_combine(config) is expected

    def test_defaults_combine(self):
        """Default config is an upsert with combine before upsert enabled"""
        assert should_combine(WriteConfig()) is True


class TestOrderingSelector:
    """Tests for precombine value lookup"""

    @pytest.fixture
    def nested_schema(self):
        return StructType([
            StructField("id", LongType(), False),
            StructField("meta", StructType([
                StructField("updated_at", LongType(), True),
                StructField("source", StringType(), True),
            ]), True),
            StructField("event_time", TimestampType(), True),
            StructField("event_date", DateType(), True),
        ])

    def test_top_level_field(self, data_schema):
        row = SelfDescribingRowSource(data_schema).wrap({"id": 1, "ts": 8})
        assert OrderingSelector("ts").select(row) == 8

    def test_columnar_row(self, data_schema):
        row = ColumnarRowSource(data_schema).wrap((1, 3, "emea", 1.0))
        assert OrderingSelector("ts").select(row) == 3

    def test_missing_field_is_none(self, data_schema):
        row = SelfDescribingRowSource(data_schema).wrap({"id": 1, "ts": 8})
        assert OrderingSelector("updated_at").select(row) is None

    def test_null_value_is_none(self, data_schema):
        row = SelfDescribingRowSource(data_schema).wrap({"id": 1})
        assert OrderingSelector("ts").select(row) is None

    def test_nested_path(self, nested_schema):
        row = SelfDescribingRowSource(nested_schema).wrap({"id": 1, "meta": {"updated_at": 99}})
        assert OrderingSelector("meta.updated_at").select(row) == 99

    def test_nested_path_through_null_struct(self, nested_schema):
        row = SelfDescribingRowSource(nested_schema).wrap({"id": 1, "meta": None})
        assert OrderingSelector("meta.updated_at").select(row) is None

    def test_timestamps_unchanged_by_default(self, nested_schema):
        moment = datetime(2025, 11, 17, 9, 30)
        row = SelfDescribingRowSource(nested_schema).wrap({"id": 1, "event_time": moment})
        assert OrderingSelector("event_time").select(row) == moment

    def test_consistent_logical_timestamp(self, nested_schema):
        moment = datetime(1970, 1, 1, 0, 0, 1, 500, tzinfo=timezone.utc)
        row = SelfDescribingRowSource(nested_schema).wrap({
            "id": 1,
            "event_time": moment,
            "event_date": date(1970, 1, 11),
        })

        assert OrderingSelector("event_time", True).select(row) == 1_000_500
        assert OrderingSelector("event_date", True).select(row) == 10

    def test_consistent_logical_timestamp_leaves_numbers(self, data_schema):
        row = SelfDescribingRowSource(data_schema).wrap({"id": 1, "ts": 8})
        assert OrderingSelector("ts", True).select(row) == 8


@pytest.fixture
def new_york_time():
    """Run with the worker's local zone set to America/New_York"""
    saved = os.environ.get("TZ")
    os.environ["TZ"] = "America/New_York"
    time.tzset()
    yield
    if saved is None:
        del os.environ["TZ"]
    else:
        os.environ["TZ"] = saved
    time.tzset()


class TestEpochMicros:
    """Tests for converting timestamps read from Spark to epoch microseconds"""

    def test_aware_values(self):
        aware = datetime(2025, 1, 1, tzinfo=timezone(timedelta(hours=2)))
        assert to_epoch_micros(aware) == to_epoch_micros(datetime(2024, 12, 31, 22, tzinfo=timezone.utc))

    def test_spark_timestamps_round_trip(self, new_york_time):
        """Naive timestamps from Spark are local wall-clock times"""
        for micros in [0, 1_000_500, 1_762_061_400_000_000]:
            assert to_epoch_micros(TimestampType().fromInternal(micros)) == micros

    def test_repeated_dst_hour_keeps_order(self, new_york_time):
        """Both 01:30 instants of the night clocks go back stay distinct"""
        earlier_micros = 1_762_061_400_000_000  # 2025-11-02 05:30 UTC
        later_micros = earlier_micros + 3_600_000_000
        schema = StructType([StructField("event_time", TimestampType(), True)])
        source = SelfDescribingRowSource(schema)
        selector = OrderingSelector("event_time", consistent_logical_timestamp=True)

        earlier = selector.select(source.wrap({"event_time": TimestampType().fromInternal(earlier_micros)}))
        later = selector.select(source.wrap({"event_time": TimestampType().fromInternal(later_micros)}))

        assert earlier == earlier_micros
        assert later == later_micros
        assert earlier < later
