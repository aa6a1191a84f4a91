from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from datastore.readings import ReadingStore


class SteppingClock:
    """Clock whose current time is set explicitly by the test."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def set(self, moment: datetime) -> None:
        self.now = moment

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture()
def clock() -> SteppingClock:
    return SteppingClock(datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture()
def store(tmp_path: Path, clock: SteppingClock) -> ReadingStore:
    reading_store = ReadingStore.from_url(f"sqlite:///{tmp_path / 'readings.db'}", clock=clock)
    reading_store.initialize()
    yield reading_store
    reading_store.close()
