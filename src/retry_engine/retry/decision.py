"""
Stop/continue decision for a retry session.

This module implements the single decision function shared by both retry
loops. After each unsatisfactory outcome the loop asks it whether to stop or
how long to wait before the next attempt.

Decision order (first match wins):
    1. Outcome is not retry-worthy: stop
    2. Retry budget exhausted (trial > max_retry_count): stop
    3. No delay has happened yet: wait initial_delay_ms
    4. Otherwise: wait whatever the backoff strategy returns
"""

import logging
from typing import Any, Callable

import structlog

from retry_engine.monitoring.metrics import retry_giveups_total
from retry_engine.retry.strategies import BackoffStrategy

logger = structlog.get_logger(__name__)


def next_sleep_time(
    should_retry: Callable[[], bool],
    *,
    tag: str,
    trial: int,
    max_retry_count: int,
    strategy: BackoffStrategy,
    initial_delay_ms: int,
    previous_delay_ms: int,
    last_value: Any = None,
    log_level: int = logging.WARNING,
    log: Any = None,
    mode: str = "exception",
    record_metrics: bool = True,
) -> int | None:
    """
    Decide whether to retry and compute the delay before the next attempt.
    
    Apart from logging and the give-up metric this has no side effects, so
    calling it twice with the same inputs gives the same answer.
    
    Args:
        should_retry: Zero-argument predicate, already closed over the
            current exception or value
        tag: Session label, only used in log events
        trial: 1-based index of the attempt that just finished
        max_retry_count: Maximum number of retries after the first attempt
        strategy: Backoff strategy used from the second delay onward
        initial_delay_ms: Delay before the second attempt (ms)
        previous_delay_ms: Delay slept before the current attempt (0 if none)
        last_value: Value produced by the current attempt (condition mode)
        log_level: Level for "will not retry" and "giving up" events
        log: Logger to use (defaults to this module's structlog logger)
        mode: Metric label, "exception" or "condition"
        record_metrics: Whether to count stops in Prometheus (an accepted
            value in condition mode is counted with reason "accepted")
    
    Returns:
        None to stop, otherwise the delay in milliseconds
    """
    log = log if log is not None else logger

    if not should_retry():
        log.log(
            log_level,
            f"Will not retry '{tag}' because condition is not satisfied",
            tag=tag,
            trial=trial,
        )
        if record_metrics:
            reason = "accepted" if mode == "condition" else "not_retryable"
            retry_giveups_total.labels(mode=mode, reason=reason).inc()
        return None

    if trial > max_retry_count:
        log.log(
            log_level,
            f"Giving up '{tag}' after retrying {max_retry_count} times",
            tag=tag,
            trial=trial,
            max_retry_count=max_retry_count,
        )
        if record_metrics:
            retry_giveups_total.labels(mode=mode, reason="exhausted").inc()
        return None

    if previous_delay_ms == 0:
        return initial_delay_ms

    return strategy.next_sleep_time(last_value, previous_delay_ms)
