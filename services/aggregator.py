"""History aggregation for chart series."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from datastore.readings import ReadingStore
from models.records import PERIOD_SPECS, ChartPoint, Period, StoredReading

logger = logging.getLogger(__name__)


def parse_stored_timestamp(value: Optional[str]) -> datetime:
    """Parse a stored timestamp into an aware UTC datetime.

    Accepts ISO-8601 date-time and date-only text. Naive values are UTC.
    """
    if value is None:
        raise ValueError("Timestamp is empty.")
    candidate = value.strip()
    if not candidate:
        raise ValueError("Timestamp is empty.")

    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"

    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError as exc:
        raise ValueError("Invalid timestamp format") from exc

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    return parsed.astimezone(timezone.utc)


class HistoryAggregator:
    """Turns a period keyword into display-ready chart points."""

    def __init__(self, store: ReadingStore) -> None:
        self.store = store

    def chart_points(self, period: Optional[str]) -> List[ChartPoint]:
        resolved = Period.parse(period)
        rows = self.store.query_aggregated(resolved)
        points = self.format_rows(rows, resolved)
        logger.debug(
            "Chart data assembled",
            extra={"period": resolved.value, "row_count": len(points)},
        )
        return points

    def format_rows(self, rows: Iterable[StoredReading], period: Period) -> List[ChartPoint]:
        display_format = PERIOD_SPECS[period].display_format
        points: List[ChartPoint] = []
        for row in rows:
            try:
                moment = parse_stored_timestamp(row.timestamp)
            except ValueError:
                logger.debug(
                    "Dropping row with unparseable timestamp",
                    extra={"period": period.value, "raw_timestamp": row.timestamp},
                )
                continue
            points.append(
                ChartPoint(
                    temperature=row.value,
                    label=moment.strftime(display_format),
                    unix_time=int(moment.timestamp()),
                )
            )
        return points
