"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

# Canonical text encoding for every stored timestamp and bucket key (UTC).
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class SensorSource(str, Enum):
    """Where a sample came from."""

    real = "real"
    synthetic = "synthetic"


class Period(str, Enum):
    """Client-selectable history ranges."""

    day = "day"
    week = "week"
    month = "month"
    year = "year"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Period":
        """Return the exactly matching period, defaulting to ``day`` for anything else."""
        if value is None:
            return cls.day
        try:
            return cls(value)
        except ValueError:
            return cls.day


@dataclass(frozen=True)
class PeriodSpec:
    """Window, bucket and display format for one period.

    ``bucket_format`` is an SQLite ``strftime`` pattern that truncates a
    canonical timestamp to the start of its bucket, or ``None`` when raw rows
    are returned.
    """

    window: timedelta
    bucket_format: Optional[str]
    display_format: str


PERIOD_SPECS: dict[Period, PeriodSpec] = {
    Period.day: PeriodSpec(timedelta(days=1), None, "%H:%M"),
    Period.week: PeriodSpec(timedelta(days=7), "%Y-%m-%d %H:00:00", "%m-%d %H:%M"),
    Period.month: PeriodSpec(timedelta(days=30), "%Y-%m-%d 00:00:00", "%m-%d"),
    Period.year: PeriodSpec(timedelta(days=365), "%Y-%m-01 00:00:00", "%Y-%m"),
}


@dataclass(slots=True)
class SensorSample:
    """A single temperature sample taken from the sensor reader."""

    value: float
    source: SensorSource
    taken_at: datetime


@dataclass(slots=True)
class StoredReading:
    """A (value, timestamp) row as returned by the reading store."""

    value: float
    timestamp: Optional[str]


@dataclass(slots=True)
class ChartPoint:
    """A history point ready for display."""

    temperature: float
    label: str
    unix_time: int
