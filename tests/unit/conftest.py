"""Unit test fixtures (fakes and stubs).

Provides a recording sleep so unit tests never actually wait.
"""

import pytest

from retry_engine.retry.engine import Retry


class SleepRecorder:
    """Stands in for time.sleep / asyncio.sleep and records requested seconds."""

    def __init__(self):
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    async def async_sleep(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def millis(self) -> list[int]:
        return [round(s * 1000) for s in self.calls]


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    """Fresh SleepRecorder for each test."""
    return SleepRecorder()


@pytest.fixture
def retry(sleep_recorder: SleepRecorder) -> Retry:
    """Retry engine with recorded sleeps and metrics disabled."""
    return Retry(
        sleep=sleep_recorder,
        async_sleep=sleep_recorder.async_sleep,
        record_metrics=False,
    )
