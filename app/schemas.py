"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from models.records import ChartPoint, SensorSource


class TemperatureResponse(BaseModel):
    """Current reading returned by ``/api/temperature``."""

    temperature: float
    timestamp: str = Field(..., description="Sample time as YYYY-MM-DD HH:MM:SS (UTC).")


class ChartDataPoint(BaseModel):
    """One point of a history series."""

    model_config = ConfigDict(populate_by_name=True)

    temperature: float
    timestamp: str = Field(..., description="Display label for the chart axis.")
    unix_time: int = Field(..., alias="unixTime", description="Epoch seconds of the point.")

    @classmethod
    def from_point(cls, point: ChartPoint) -> "ChartDataPoint":
        return cls(temperature=point.temperature, timestamp=point.label, unix_time=point.unix_time)


class HealthResponse(BaseModel):
    """Service status and the source of the most recent sensor sample."""

    status: str = "ok"
    sensor_source: Optional[SensorSource] = None
