from __future__ import annotations

import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Callable, Optional

from sqlalchemy import (
    Column,
    Float,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    func,
    insert,
    select,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from models.records import PERIOD_SPECS, TIMESTAMP_FORMAT, Period, StoredReading
from settings import get_settings

logger = logging.getLogger(__name__)

metadata = MetaData()

readings_table = Table(
    "temperature_readings",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("temperature", Float, nullable=False),
    Column("timestamp", String(32), nullable=False),
)

Index("idx_timestamp", readings_table.c.timestamp)


class ReadingStoreError(RuntimeError):
    """Raised when the reading store cannot be initialized or queried."""


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ReadingStore:
    """Append-only SQLite table of temperature readings."""

    def __init__(
        self,
        engine: Engine,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.engine = engine
        self._clock = clock

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "ReadingStore":
        connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
        engine = create_engine(url, connect_args=connect_args)
        return cls(engine, **kwargs)

    def initialize(self) -> None:
        try:
            metadata.create_all(self.engine, checkfirst=True)
        except SQLAlchemyError as exc:
            raise ReadingStoreError(f"Cannot initialize reading store: {exc}") from exc

    def append(self, value: float) -> bool:
        """Insert a reading stamped with the store's clock.

        Failures are logged and reported through the return value only.
        """
        stamp = self._now().strftime(TIMESTAMP_FORMAT)
        try:
            with self.engine.begin() as conn:
                conn.execute(
                    insert(readings_table).values(temperature=value, timestamp=stamp)
                )
        except SQLAlchemyError as exc:
            logger.error(
                "Error saving temperature to database",
                extra={"value": value, "reason": str(exc)},
            )
            return False
        return True

    def query_aggregated(self, period: Period) -> list[StoredReading]:
        """Return time-ordered rows for the period's window and bucketing."""
        spec = PERIOD_SPECS[period]
        cutoff = (self._now() - spec.window).strftime(TIMESTAMP_FORMAT)
        column = readings_table.c.timestamp
        # Rewrites any ISO-8601 variant into the canonical encoding; NULL when unparseable.
        normalized = func.datetime(column)

        if spec.bucket_format is None:
            stmt = (
                select(readings_table.c.temperature, normalized)
                .where(normalized >= cutoff)
                .order_by(normalized, readings_table.c.id)
            )
        else:
            bucket = func.strftime(spec.bucket_format, column)
            stmt = (
                select(func.avg(readings_table.c.temperature), bucket)
                .where(normalized >= cutoff)
                .group_by(bucket)
                .order_by(bucket)
            )

        try:
            with self.engine.connect() as conn:
                rows = conn.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise ReadingStoreError(str(exc)) from exc

        return [StoredReading(value=float(value), timestamp=stamp) for value, stamp in rows]

    def close(self) -> None:
        self.engine.dispose()

    def _now(self) -> datetime:
        now = self._clock()
        if now.tzinfo is None:
            return now.replace(tzinfo=timezone.utc)
        return now.astimezone(timezone.utc)


@lru_cache
def build_default_store(url: Optional[str] = None) -> ReadingStore:
    settings = get_settings()
    store = ReadingStore.from_url(settings.database_url if url is None else url)
    store.initialize()
    return store
