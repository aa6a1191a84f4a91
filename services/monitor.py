"""Wiring between the sensor, the reading store and history aggregation."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from datastore.readings import ReadingStore, build_default_store
from models.records import ChartPoint, SensorSample, SensorSource
from services.aggregator import HistoryAggregator
from services.sensor import SensorReader
from settings import get_settings

logger = logging.getLogger(__name__)


class MonitorService:
    """Coordinates sensor reads, persistence and history queries."""

    def __init__(
        self,
        sensor: SensorReader,
        store: ReadingStore,
        aggregator: HistoryAggregator,
    ) -> None:
        self.sensor = sensor
        self.store = store
        self.aggregator = aggregator

    def current_reading(self) -> SensorSample:
        """Read the sensor and record the value.

        A failed write is logged by the store and does not affect the
        returned sample.
        """
        sample = self.sensor.read()
        self.store.append(sample.value)
        return sample

    def chart_data(self, period: Optional[str]) -> List[ChartPoint]:
        return self.aggregator.chart_points(period)

    @property
    def sensor_source(self) -> Optional[SensorSource]:
        return self.sensor.last_source

    def shutdown(self) -> None:
        """Release the store's connections during application shutdown."""
        self.store.close()


@lru_cache
def build_default_monitor() -> MonitorService:
    """Factory that wires the monitor from environment settings."""
    settings = get_settings()
    store = build_default_store()
    sensor = SensorReader(
        path=Path(settings.sensor_path),
        allow_synthetic=settings.allow_synthetic,
    )
    logger.info(
        "Monitor ready",
        extra={"path": settings.sensor_path},
    )
    return MonitorService(sensor=sensor, store=store, aggregator=HistoryAggregator(store))
