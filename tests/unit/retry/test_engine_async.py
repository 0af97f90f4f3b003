"""
Unit tests for the Retry engine async entry points.

The async loops share the decision function with the sync ones; these
tests focus on awaiting, suspension and cancellation.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from retry_engine.retry.engine import Retry
from retry_engine.retry.exceptions import RetryConfigurationError
from retry_engine.retry.strategies import Constant, ExponentialBackOff


@pytest.mark.asyncio
async def test_on_exception_async_retries_then_succeeds(retry: Retry, sleep_recorder):
    """Test async operation fails twice and then returns a value."""
    operation = AsyncMock(side_effect=[ConnectionError("test"), ConnectionError("test"), 42])

    result = await retry.on_exception_async(
        "test", ExponentialBackOff(2, 10_000), 3, 100, lambda e: True, operation
    )

    assert result == 42
    assert operation.await_count == 3
    assert sleep_recorder.millis == [100, 200]


@pytest.mark.asyncio
async def test_on_exception_async_exhaustion_raises_last_error(retry: Retry, sleep_recorder):
    """Test the latest error is raised after max_retry_count + 1 awaits."""
    errors = [TimeoutError(f"test #{i}") for i in range(1, 4)]
    operation = AsyncMock(side_effect=errors)

    with pytest.raises(TimeoutError) as excinfo:
        await retry.on_exception_async("test", Constant(), 2, 1000, lambda e: True, operation)

    assert excinfo.value is errors[-1]
    assert operation.await_count == 3
    assert sleep_recorder.millis == [1000, 1000]


@pytest.mark.asyncio
async def test_on_exception_async_non_retryable(retry: Retry, sleep_recorder):
    """Test a rejected error is raised after a single await."""
    operation = AsyncMock(side_effect=PermissionError("not a test"))

    with pytest.raises(PermissionError):
        await retry.on_exception_async("test", Constant(), 2, 1000, lambda e: False, operation)

    assert operation.await_count == 1
    assert sleep_recorder.calls == []


@pytest.mark.asyncio
async def test_on_exception_async_validates_first(retry: Retry):
    """Test configuration errors are raised before awaiting the operation."""
    operation = AsyncMock(return_value=1)

    with pytest.raises(RetryConfigurationError):
        await retry.on_exception_async("test", Constant(), 1, -5, lambda e: True, operation)

    operation.assert_not_awaited()


@pytest.mark.asyncio
async def test_on_condition_async_retries_then_accepts(retry: Retry, sleep_recorder):
    """Test -1 then 42 with predicate v < 0 returns 42."""
    operation = AsyncMock(side_effect=[-1, 42])

    result = await retry.on_condition_async("test", Constant(), 2, 1000, lambda v: v < 0, operation)

    assert result == 42
    assert sleep_recorder.millis == [1000]


@pytest.mark.asyncio
async def test_on_condition_with_metadata_async_exhausted(retry: Retry, sleep_recorder):
    """Test async condition mode reports exhaustion and returns the last value."""
    operation = AsyncMock(side_effect=["pending", "pending", "still pending"])

    value, metadata = await retry.on_condition_with_metadata_async(
        "test", Constant(), 2, 10, lambda v: "pending" in v, operation
    )

    assert value == "still pending"
    assert metadata.exhausted is True
    assert metadata.total_attempts == 3
    assert metadata.delays_ms == (10, 10)


@pytest.mark.asyncio
async def test_cancellation_interrupts_pending_delay():
    """Test cancelling the task aborts the delay without further attempts."""
    engine = Retry(record_metrics=False)
    operation = AsyncMock(side_effect=ConnectionError("test"))

    task = asyncio.create_task(
        engine.on_exception_async("test", Constant(), 3, 60_000, lambda e: True, operation)
    )
    await asyncio.sleep(0.05)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    assert operation.await_count == 1


@pytest.mark.asyncio
async def test_cancelled_error_is_not_retried(retry: Retry):
    """Test CancelledError raised by the operation bypasses the predicate."""
    operation = AsyncMock(side_effect=asyncio.CancelledError())
    predicate = lambda e: True  # noqa: E731

    with pytest.raises(asyncio.CancelledError):
        await retry.on_exception_async("test", Constant(), 3, 0, predicate, operation)

    assert operation.await_count == 1
