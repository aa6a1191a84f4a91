"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from app.schemas import ChartDataPoint, HealthResponse, TemperatureResponse
from models.records import TIMESTAMP_FORMAT
from services.monitor import MonitorService

router = APIRouter()


def get_monitor(request: Request) -> MonitorService:
    return request.app.state.monitor


@router.get(
    "/api/temperature",
    response_model=TemperatureResponse,
    summary="Read the CPU temperature now and record it.",
)
def current_temperature(
    monitor: MonitorService = Depends(get_monitor),
) -> TemperatureResponse:
    sample = monitor.current_reading()
    return TemperatureResponse(
        temperature=sample.value,
        timestamp=sample.taken_at.strftime(TIMESTAMP_FORMAT),
    )


@router.get(
    "/api/chart-data",
    response_model=List[ChartDataPoint],
    summary="Historical series for one of day, week, month or year.",
)
def chart_data(
    period: Optional[str] = Query(None, description="day, week, month or year; anything else means day."),
    monitor: MonitorService = Depends(get_monitor),
) -> List[ChartDataPoint]:
    return [ChartDataPoint.from_point(point) for point in monitor.chart_data(period)]


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
def healthcheck(monitor: MonitorService = Depends(get_monitor)) -> HealthResponse:
    return HealthResponse(status="ok", sensor_source=monitor.sensor_source)
