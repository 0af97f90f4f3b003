"""
Backoff strategies for computing delays between retries.

This module implements the Strategy Pattern for backoff growth. A strategy
is asked for the next delay only from the second wait onward: the first wait
always uses the session's initial delay, so strategies describe how delays
grow, not where they start.

Built-in strategies:
    1. Constant: Same delay for every retry
    2. Linear: Delay grows by a fixed step, capped at a maximum
    3. ExponentialBackOff: Delay is multiplied by a factor, capped at a maximum
    4. Custom: Wraps a user-supplied function

Any object with a matching `next_sleep_time` method is accepted wherever a
BackoffStrategy is expected.
"""

from dataclasses import dataclass
from typing import Any, Callable, Protocol, runtime_checkable

from retry_engine.retry.exceptions import RetryConfigurationError


@runtime_checkable
class BackoffStrategy(Protocol):
    """
    Protocol for backoff strategies.
    
    Implementations must be pure: no mutable state, no sleeping. Sleeping
    is the retry loop's job. The same instance may be shared by any number
    of concurrent retry sessions.
    """

    def next_sleep_time(self, last_value: Any, previous_delay_ms: int) -> int:
        """
        Compute the next delay.
        
        Args:
            last_value: Value produced by the last attempt (condition-triggered
                retry only, None otherwise)
            previous_delay_ms: Delay slept before the last attempt (ms, > 0)
        
        Returns:
            Delay in milliseconds before the next attempt
        """
        ...


@dataclass(frozen=True)
class Constant:
    """Uniform delay: every retry waits as long as the first one."""

    def next_sleep_time(self, last_value: Any, previous_delay_ms: int) -> int:
        return previous_delay_ms


@dataclass(frozen=True)
class Linear:
    """
    Linear growth with cap.
    
    Delay = min(previous + step_ms, max_ms)
    
    If max_ms is below the initial delay, every delay after the first one
    is clamped to max_ms.
    
    Attributes:
        step_ms: Added to the previous delay on each retry (ms, >= 0)
        max_ms: Upper bound for any computed delay (ms, >= 0)
    """

    step_ms: int
    max_ms: int

    def __post_init__(self) -> None:
        """Validate strategy parameters."""
        if self.step_ms < 0:
            raise RetryConfigurationError("step_ms must be >= 0")

        if self.max_ms < 0:
            raise RetryConfigurationError("max_ms must be >= 0")

    def next_sleep_time(self, last_value: Any, previous_delay_ms: int) -> int:
        return min(previous_delay_ms + self.step_ms, self.max_ms)


@dataclass(frozen=True)
class ExponentialBackOff:
    """
    Exponential growth with cap.
    
    Delay = min(previous * factor, max_ms)
    
    A factor <= 1 gives non-growing or shrinking delays. That is allowed;
    only the max_ms clamp is applied.
    
    Each step truncates to whole milliseconds, so a fractional factor
    compounds the truncated delay: initial 100 with factor 1.5 gives
    100, 150, 225, 337, 505 rather than 100 * 1.5 ** (n - 2). Integer
    factors are exact.
    
    Attributes:
        factor: Multiplier applied to the previous delay
        max_ms: Upper bound for any computed delay (ms)
    """

    factor: float
    max_ms: int

    def next_sleep_time(self, last_value: Any, previous_delay_ms: int) -> int:
        return int(min(previous_delay_ms * self.factor, self.max_ms))


@dataclass(frozen=True)
class Custom:
    """
    User-defined backoff from a plain function.
    
    Example:
        >>> # Wait longer while a polled job reports it is still queued
        >>> strategy = Custom(lambda job, prev: prev * 3 if job.queued else prev)
    
    Attributes:
        fn: Pure function (last_value, previous_delay_ms) -> next delay in ms
    """

    fn: Callable[[Any, int], int]

    def next_sleep_time(self, last_value: Any, previous_delay_ms: int) -> int:
        return self.fn(last_value, previous_delay_ms)
