"""Tests for the SQLite-backed reading store."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from sqlalchemy import inspect, insert

from datastore.readings import ReadingStore, ReadingStoreError, readings_table
from models.records import Period


def test_initialize_is_idempotent_and_creates_index(store: ReadingStore) -> None:
    store.initialize()

    inspector = inspect(store.engine)
    assert "temperature_readings" in inspector.get_table_names()
    index_names = {index["name"] for index in inspector.get_indexes("temperature_readings")}
    assert "idx_timestamp" in index_names


def test_append_then_day_query_includes_value(store: ReadingStore) -> None:
    assert store.append(47.25) is True

    rows = store.query_aggregated(Period.day)

    assert [row.value for row in rows] == [47.25]
    assert rows[0].timestamp == "2024-06-01 12:00:00"


def test_day_query_excludes_rows_outside_window(store: ReadingStore, clock) -> None:
    clock.set(datetime(2024, 5, 30, 12, 0, tzinfo=timezone.utc))
    store.append(41.0)
    clock.set(datetime(2024, 6, 1, 11, 0, tzinfo=timezone.utc))
    store.append(42.0)
    clock.set(datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc))

    rows = store.query_aggregated(Period.day)

    assert [row.value for row in rows] == [42.0]


def test_week_buckets_average_by_hour(store: ReadingStore, clock) -> None:
    clock.set(datetime(2024, 6, 1, 10, 5, tzinfo=timezone.utc))
    store.append(50.0)
    clock.advance(minutes=35)
    store.append(60.0)
    clock.advance(minutes=30)
    store.append(70.0)
    clock.set(datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc))

    rows = store.query_aggregated(Period.week)

    assert [(row.timestamp, row.value) for row in rows] == [
        ("2024-06-01 10:00:00", pytest.approx(55.0)),
        ("2024-06-01 11:00:00", pytest.approx(70.0)),
    ]


def test_month_and_year_bucket_by_day_and_month(store: ReadingStore, clock) -> None:
    clock.set(datetime(2024, 5, 20, 8, 0, tzinfo=timezone.utc))
    store.append(40.0)
    clock.set(datetime(2024, 5, 20, 20, 0, tzinfo=timezone.utc))
    store.append(50.0)
    clock.set(datetime(2024, 5, 31, 9, 0, tzinfo=timezone.utc))
    store.append(60.0)
    clock.set(datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc))

    month = store.query_aggregated(Period.month)
    year = store.query_aggregated(Period.year)

    assert [(row.timestamp, row.value) for row in month] == [
        ("2024-05-20 00:00:00", pytest.approx(45.0)),
        ("2024-05-31 00:00:00", pytest.approx(60.0)),
    ]
    assert [(row.timestamp, row.value) for row in year] == [
        ("2024-05-01 00:00:00", pytest.approx(50.0)),
    ]


@pytest.mark.parametrize("period", list(Period))
def test_results_are_time_ordered(store: ReadingStore, clock, period: Period) -> None:
    for hours_ago in (3, 27, 1, 400, 50, 0):
        clock.set(datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc))
        clock.advance(hours=-hours_ago)
        store.append(float(hours_ago))
    clock.set(datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc))

    stamps = [row.timestamp for row in store.query_aggregated(period)]

    assert stamps
    assert stamps == sorted(stamps)


def test_append_failure_returns_false(tmp_path) -> None:
    uninitialized = ReadingStore.from_url(f"sqlite:///{tmp_path / 'bare.db'}")

    assert uninitialized.append(50.0) is False
    uninitialized.close()


def test_query_failure_raises_store_error(tmp_path) -> None:
    uninitialized = ReadingStore.from_url(f"sqlite:///{tmp_path / 'bare.db'}")

    with pytest.raises(ReadingStoreError):
        uninitialized.query_aggregated(Period.day)
    uninitialized.close()


def test_initialize_failure_raises_store_error(tmp_path) -> None:
    unreachable = ReadingStore.from_url(f"sqlite:///{tmp_path / 'missing' / 'nested' / 'x.db'}")

    with pytest.raises(ReadingStoreError):
        unreachable.initialize()
    unreachable.close()


def test_garbage_timestamp_rows_are_excluded(store: ReadingStore) -> None:
    store.append(45.0)
    with store.engine.begin() as conn:
        conn.execute(insert(readings_table).values(temperature=99.0, timestamp="garbage"))

    for period in Period:
        rows = store.query_aggregated(period)
        assert [row.value for row in rows] == [pytest.approx(45.0)]


def test_iso_encoded_rows_are_windowed_and_ordered_in_time(store: ReadingStore) -> None:
    store.append(45.0)
    with store.engine.begin() as conn:
        conn.execute(
            insert(readings_table),
            [
                {"temperature": 40.0, "timestamp": "2024-06-01T09:00:00Z"},
                {"temperature": 30.0, "timestamp": "2024-05-31T08:00:00Z"},
            ],
        )

    day = store.query_aggregated(Period.day)
    week = store.query_aggregated(Period.week)

    assert [(row.timestamp, row.value) for row in day] == [
        ("2024-06-01 09:00:00", 40.0),
        ("2024-06-01 12:00:00", 45.0),
    ]
    assert [row.timestamp for row in week] == [
        "2024-05-31 08:00:00",
        "2024-06-01 09:00:00",
        "2024-06-01 12:00:00",
    ]
