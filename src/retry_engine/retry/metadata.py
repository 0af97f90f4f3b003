"""
Retry metadata tracking.

This module defines the RetryMetadata dataclass that describes how a
condition-triggered retry session ended.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class RetryMetadata:
    """
    Outcome of a condition-triggered retry session.
    
    Condition-triggered retry always hands back the last value, whether the
    predicate accepted it or the budget ran out first. This record lets the
    caller tell the two apart.
    
    Attributes:
        total_attempts: Number of times the operation was invoked
        exhausted: True if retries ran out while the value was still unsatisfactory
        delays_ms: Delays requested before attempts 2..n, in order (ms)
    """

    total_attempts: int
    exhausted: bool
    delays_ms: tuple[int, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate metadata invariants."""
        if self.total_attempts < 1:
            raise ValueError("total_attempts must be >= 1")

        if len(self.delays_ms) != self.total_attempts - 1:
            raise ValueError("delays_ms must have one entry per retry")

    @property
    def total_delay_ms(self) -> int:
        """Sum of requested delays, ignoring non-positive (immediate) retries."""
        return sum(d for d in self.delays_ms if d > 0)
