"""
Retry engine with pluggable backoff.

This module implements the Retry class, the entry point for running an
operation under a bounded retry policy. Two modes share one decision
function (see retry_engine.retry.decision):

    1. on_exception: Retry while the operation raises a retry-worthy exception.
       When retries stop, the latest exception is re-raised unchanged.
    2. on_condition: Retry while the returned value is unsatisfactory.
       When retries stop, the latest value is returned (never raises).

Each mode has an async twin that waits with asyncio.sleep instead of
blocking the calling thread.

Usage:
    retry = Retry()
    body = retry.on_exception(
        "fetch-profile",
        ExponentialBackOff(factor=2, max_ms=10_000),
        max_retry_count=3,
        initial_delay_ms=500,
        should_retry=lambda e: isinstance(e, ConnectionError),
        operation=lambda: client.get("/profile"),
    )
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, TypeVar

import structlog

from retry_engine.config import Settings
from retry_engine.logging_config import resolve_log_level
from retry_engine.monitoring.metrics import retry_sleep_seconds, retry_sleeps_total
from retry_engine.retry.decision import next_sleep_time
from retry_engine.retry.exceptions import RetryConfigurationError
from retry_engine.retry.metadata import RetryMetadata
from retry_engine.retry.strategies import BackoffStrategy

A = TypeVar("A")

logger = structlog.get_logger(__name__)


class Retry:
    """
    Retry engine for failure-triggered and condition-triggered retry.
    
    A Retry instance only holds configuration (log levels, sleep functions,
    logger), so one instance can serve any number of sessions and threads.
    All per-session state (trial number, previous delay, last value) lives
    in the call itself.
    
    Attributes:
        retry_log_level: Level for "will not retry" / "giving up" events
        sleep_log_level: Level for "sleeping" / "retrying immediately" events
        record_metrics: Whether Prometheus metrics are updated
    """

    def __init__(
        self,
        retry_log_level: int | str = logging.WARNING,
        sleep_log_level: int | str = logging.INFO,
        *,
        sleep: Callable[[float], None] = time.sleep,
        async_sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        log: Any = None,
        record_metrics: bool = True,
    ):
        """
        Initialize retry engine.
        
        Args:
            retry_log_level: Level (int or name) for stop events
            sleep_log_level: Level (int or name) for delay events
            sleep: Blocking sleep taking seconds, used by the sync entry points
            async_sleep: Awaitable sleep taking seconds, used by the async ones
            log: Logger with a log(level, event, **kw) method; defaults to
                this module's structlog logger
            record_metrics: Update Prometheus counters when True
        
        Raises:
            RetryConfigurationError: If a level name is unknown
        """
        self.retry_log_level = resolve_log_level(retry_log_level)
        self.sleep_log_level = resolve_log_level(sleep_log_level)
        self.record_metrics = record_metrics
        self._sleep = sleep
        self._async_sleep = async_sleep
        self._log = log if log is not None else logger

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "Retry":
        """Build an engine from application settings.

        Keyword-only arguments of __init__ (sleep, log, ...) may be passed
        through kwargs; record_metrics defaults to settings.METRICS_ENABLED.
        """
        kwargs.setdefault("record_metrics", settings.METRICS_ENABLED)
        return cls(settings.RETRY_LOG_LEVEL, settings.SLEEP_LOG_LEVEL, **kwargs)

    # ------------------------------------------------------------------
    # Failure-triggered retry
    # ------------------------------------------------------------------

    def on_exception(
        self,
        tag: str,
        strategy: BackoffStrategy,
        max_retry_count: int,
        initial_delay_ms: int,
        should_retry: Callable[[Exception], bool],
        operation: Callable[[], A],
    ) -> A:
        """
        Run operation, retrying while it raises a retry-worthy exception.
        
        Args:
            tag: Label for log events
            strategy: Backoff strategy for delays after the first one
            max_retry_count: Maximum retries after the first attempt (>= 0)
            initial_delay_ms: Delay before the second attempt (ms, >= 0)
            should_retry: Predicate deciding whether an exception is retry-worthy
            operation: Zero-argument callable to invoke
        
        Returns:
            Value of the first successful invocation
        
        Raises:
            RetryConfigurationError: Invalid arguments (before any attempt)
            Exception: The exception from the most recent failed invocation
        """
        self._validate(max_retry_count, initial_delay_ms)

        trial = 1
        previous_delay_ms = 0

        while True:
            try:
                return operation()
            except Exception as e:
                delay_ms = self._decide(
                    lambda: should_retry(e),
                    tag, trial, max_retry_count, strategy,
                    initial_delay_ms, previous_delay_ms, None, "exception",
                )
                if delay_ms is None:
                    raise

            seconds = self._announce(tag, trial, delay_ms, "exception")
            if seconds > 0:
                self._sleep(seconds)

            trial += 1
            previous_delay_ms = delay_ms

    async def on_exception_async(
        self,
        tag: str,
        strategy: BackoffStrategy,
        max_retry_count: int,
        initial_delay_ms: int,
        should_retry: Callable[[Exception], bool],
        operation: Callable[[], Awaitable[A]],
    ) -> A:
        """
        Async variant of on_exception.
        
        operation returns an awaitable; delays suspend the current task.
        Cancelling the task interrupts a pending delay.
        """
        self._validate(max_retry_count, initial_delay_ms)

        trial = 1
        previous_delay_ms = 0

        while True:
            try:
                return await operation()
            except Exception as e:
                delay_ms = self._decide(
                    lambda: should_retry(e),
                    tag, trial, max_retry_count, strategy,
                    initial_delay_ms, previous_delay_ms, None, "exception",
                )
                if delay_ms is None:
                    raise

            seconds = self._announce(tag, trial, delay_ms, "exception")
            if seconds > 0:
                await self._async_sleep(seconds)

            trial += 1
            previous_delay_ms = delay_ms

    # ------------------------------------------------------------------
    # Condition-triggered retry
    # ------------------------------------------------------------------

    def on_condition(
        self,
        tag: str,
        strategy: BackoffStrategy,
        max_retry_count: int,
        initial_delay_ms: int,
        should_retry: Callable[[A], bool],
        operation: Callable[[], A],
    ) -> A:
        """
        Run operation, retrying while its result is unsatisfactory.
        
        The most recent value is returned both when should_retry accepts it
        and when the retry budget runs out. Use on_condition_with_metadata
        to tell those cases apart.
        
        Args:
            tag: Label for log events
            strategy: Backoff strategy for delays after the first one
            max_retry_count: Maximum retries after the first attempt (>= 0)
            initial_delay_ms: Delay before the second attempt (ms, >= 0)
            should_retry: Predicate returning True for unsatisfactory values
            operation: Zero-argument callable to invoke; must not raise
        
        Returns:
            Value of the last invocation
        
        Raises:
            RetryConfigurationError: Invalid arguments (before any attempt)
        """
        value, _ = self.on_condition_with_metadata(
            tag, strategy, max_retry_count, initial_delay_ms, should_retry, operation
        )
        return value

    def on_condition_with_metadata(
        self,
        tag: str,
        strategy: BackoffStrategy,
        max_retry_count: int,
        initial_delay_ms: int,
        should_retry: Callable[[A], bool],
        operation: Callable[[], A],
    ) -> tuple[A, RetryMetadata]:
        """
        Same as on_condition, also returning how the session ended.
        
        Returns:
            Tuple of (last value, retry metadata)
        """
        self._validate(max_retry_count, initial_delay_ms)

        trial = 1
        previous_delay_ms = 0
        delays: list[int] = []

        while True:
            value = operation()
            unsatisfactory = should_retry(value)

            delay_ms = self._decide(
                lambda: unsatisfactory,
                tag, trial, max_retry_count, strategy,
                initial_delay_ms, previous_delay_ms, value, "condition",
            )
            if delay_ms is None:
                return value, RetryMetadata(
                    total_attempts=trial,
                    exhausted=unsatisfactory,
                    delays_ms=tuple(delays),
                )

            seconds = self._announce(tag, trial, delay_ms, "condition")
            if seconds > 0:
                self._sleep(seconds)

            delays.append(delay_ms)
            trial += 1
            previous_delay_ms = delay_ms

    async def on_condition_async(
        self,
        tag: str,
        strategy: BackoffStrategy,
        max_retry_count: int,
        initial_delay_ms: int,
        should_retry: Callable[[A], bool],
        operation: Callable[[], Awaitable[A]],
    ) -> A:
        """Async variant of on_condition."""
        value, _ = await self.on_condition_with_metadata_async(
            tag, strategy, max_retry_count, initial_delay_ms, should_retry, operation
        )
        return value

    async def on_condition_with_metadata_async(
        self,
        tag: str,
        strategy: BackoffStrategy,
        max_retry_count: int,
        initial_delay_ms: int,
        should_retry: Callable[[A], bool],
        operation: Callable[[], Awaitable[A]],
    ) -> tuple[A, RetryMetadata]:
        """Async variant of on_condition_with_metadata."""
        self._validate(max_retry_count, initial_delay_ms)

        trial = 1
        previous_delay_ms = 0
        delays: list[int] = []

        while True:
            value = await operation()
            unsatisfactory = should_retry(value)

            delay_ms = self._decide(
                lambda: unsatisfactory,
                tag, trial, max_retry_count, strategy,
                initial_delay_ms, previous_delay_ms, value, "condition",
            )
            if delay_ms is None:
                return value, RetryMetadata(
                    total_attempts=trial,
                    exhausted=unsatisfactory,
                    delays_ms=tuple(delays),
                )

            seconds = self._announce(tag, trial, delay_ms, "condition")
            if seconds > 0:
                await self._async_sleep(seconds)

            delays.append(delay_ms)
            trial += 1
            previous_delay_ms = delay_ms

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _decide(
        self,
        should_retry: Callable[[], bool],
        tag: str,
        trial: int,
        max_retry_count: int,
        strategy: BackoffStrategy,
        initial_delay_ms: int,
        previous_delay_ms: int,
        last_value: Any,
        mode: str,
    ) -> int | None:
        return next_sleep_time(
            should_retry,
            tag=tag,
            trial=trial,
            max_retry_count=max_retry_count,
            strategy=strategy,
            initial_delay_ms=initial_delay_ms,
            previous_delay_ms=previous_delay_ms,
            last_value=last_value,
            log_level=self.retry_log_level,
            log=self._log,
            mode=mode,
            record_metrics=self.record_metrics,
        )

    def _announce(self, tag: str, trial: int, delay_ms: int, mode: str) -> float:
        """Log and count an upcoming retry; return seconds to wait (0 = none)."""
        if self.record_metrics:
            retry_sleeps_total.labels(mode=mode).inc()
            retry_sleep_seconds.labels(mode=mode).observe(max(delay_ms, 0) / 1000)

        if delay_ms <= 0:
            self._log.log(
                self.sleep_log_level,
                f"Retrying '{tag}' immediately",
                tag=tag,
                trial=trial,
            )
            return 0.0

        self._log.log(
            self.sleep_log_level,
            f"Sleeping {delay_ms} ms before retrying '{tag}'",
            tag=tag,
            trial=trial,
            delay_ms=delay_ms,
        )
        return delay_ms / 1000

    @staticmethod
    def _validate(max_retry_count: int, initial_delay_ms: int) -> None:
        if max_retry_count < 0:
            raise RetryConfigurationError("Maximum retry count must be non-negative!")

        if initial_delay_ms < 0:
            raise RetryConfigurationError("Initial sleep time must be non-negative!")
