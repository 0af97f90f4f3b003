"""
Retry Engine.

Converts transient failure into eventual success by re-invoking an operation
under a bounded retry policy:
- Failure-triggered retry (re-raise the latest exception when giving up)
- Condition-triggered retry (return the latest value when giving up)
- Constant, linear, exponential and custom backoff

Architecture: backoff strategies -> decision function -> attempt loops,
with structlog logging and Prometheus metrics around them.
"""

from retry_engine.retry import (
    BackoffStrategy,
    Constant,
    Custom,
    ExponentialBackOff,
    Linear,
    Retry,
    RetryConfigurationError,
    RetryEngineError,
    RetryMetadata,
)

__version__ = "0.1.0"

__all__ = [
    "Retry",
    "RetryEngineError",
    "RetryConfigurationError",
    "RetryMetadata",
    "BackoffStrategy",
    "Constant",
    "Linear",
    "ExponentialBackOff",
    "Custom",
]
