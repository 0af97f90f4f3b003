"""
Retry engine with pluggable backoff strategies.

This package re-invokes an operation under a bounded retry policy:

1. **Failure-triggered retry**: retry while the operation raises a
   retry-worthy exception, then re-raise the latest one
2. **Condition-triggered retry**: retry while the returned value is
   unsatisfactory, then return the latest value

Main Components:
    - Retry: Entry points (sync and async) for both retry modes
    - next_sleep_time: Shared stop/continue/delay decision function
    - BackoffStrategy: Protocol for delay growth (Constant, Linear,
      ExponentialBackOff, Custom)
    - RetryMetadata: How a condition-triggered session ended
    - RetryConfigurationError: Invalid retry arguments

Usage:
    >>> from retry_engine.retry import Constant, Retry
    >>> retry = Retry()
    >>> value = retry.on_condition("poll", Constant(), 5, 200, lambda v: v is None, poll)
"""

from retry_engine.retry.decision import next_sleep_time
from retry_engine.retry.engine import Retry
from retry_engine.retry.exceptions import RetryConfigurationError, RetryEngineError
from retry_engine.retry.metadata import RetryMetadata
from retry_engine.retry.strategies import (
    BackoffStrategy,
    Constant,
    Custom,
    ExponentialBackOff,
    Linear,
)

__all__ = [
    "Retry",
    "next_sleep_time",
    "RetryEngineError",
    "RetryConfigurationError",
    "RetryMetadata",
    "BackoffStrategy",
    "Constant",
    "Linear",
    "ExponentialBackOff",
    "Custom",
]
