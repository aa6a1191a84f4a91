"""CPU temperature sensor with a synthetic fallback."""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from pathlib import Path
from threading import Lock
from typing import Callable, Optional

from models.records import SensorSample, SensorSource

logger = logging.getLogger(__name__)

SYNTHETIC_BASELINE = 55.0
SYNTHETIC_MIN = 40.0
SYNTHETIC_MAX = 80.0


class SensorUnavailableError(RuntimeError):
    """Raised when the sensor cannot be read and no fallback is allowed."""


def synthetic_temperature(now: float) -> float:
    """Placeholder value derived from ``now`` (epoch seconds).

    A slow sweep over the current minute (+/-5 degrees) plus a small
    millisecond-driven jitter (-1..+0.8 degrees) around the baseline, clamped
    to the plausible CPU range.
    """
    variation = 10.0 * (0.5 - (int(now) % 60) / 60.0)
    noise = ((int(now * 1000) % 10) - 5) * 0.2
    value = SYNTHETIC_BASELINE + variation + noise
    return min(max(value, SYNTHETIC_MIN), SYNTHETIC_MAX)


class SensorReader:
    """Reads millidegrees from a sysfs thermal zone."""

    def __init__(
        self,
        path: Path,
        allow_synthetic: bool = True,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.path = path
        self.allow_synthetic = allow_synthetic
        self._clock = clock
        self._last_source: Optional[SensorSource] = None
        self._lock = Lock()

    @property
    def last_source(self) -> Optional[SensorSource]:
        with self._lock:
            return self._last_source

    def read(self) -> SensorSample:
        now = self._clock()
        taken_at = datetime.fromtimestamp(now, tz=timezone.utc)
        try:
            value = self._read_real()
        except (OSError, ValueError) as exc:
            if not self.allow_synthetic:
                raise SensorUnavailableError(
                    f"cannot read {self.path}: {exc}"
                ) from exc
            self._record_source(SensorSource.synthetic, reason=str(exc))
            return SensorSample(
                value=synthetic_temperature(now),
                source=SensorSource.synthetic,
                taken_at=taken_at,
            )

        self._record_source(SensorSource.real)
        return SensorSample(value=value, source=SensorSource.real, taken_at=taken_at)

    def _read_real(self) -> float:
        raw = self.path.read_text().strip()
        return int(raw) / 1000.0

    def _record_source(self, source: SensorSource, reason: Optional[str] = None) -> None:
        with self._lock:
            previous = self._last_source
            self._last_source = source
        if previous == source:
            return
        if source is SensorSource.synthetic:
            logger.warning(
                "Sensor unreadable, serving synthetic temperatures",
                extra={"path": str(self.path), "reason": reason},
            )
        elif previous is not None:
            logger.info("Sensor readable again", extra={"path": str(self.path)})
