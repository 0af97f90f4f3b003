"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

import pytest

from retry_engine.config import Settings


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.
    
    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.SLEEP_LOG_LEVEL = "DEBUG"
    """
    return Settings(
        # === Logging ===
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",
        RETRY_LOG_LEVEL="WARNING",
        SLEEP_LOG_LEVEL="INFO",
        
        # === Monitoring ===
        METRICS_ENABLED=False,  # Keep the global registry untouched unless a test needs it
    )


class FailingOperation:
    """Callable that raises a fresh exception for the first `failures` calls.
    
    Every raised exception is kept in `raised` so tests can check which one
    reached the caller.
    """

    def __init__(self, failures: int, message: str = "test", result=42):
        self.failures = failures
        self.message = message
        self.result = result
        self.calls = 0
        self.raised: list[Exception] = []

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            error = RuntimeError(f"{self.message} #{self.calls}")
            self.raised.append(error)
            raise error
        return self.result


class SequenceOperation:
    """Callable returning the given values in order, repeating the last one."""

    def __init__(self, *values):
        self.values = list(values)
        self.calls = 0

    def __call__(self):
        value = self.values[min(self.calls, len(self.values) - 1)]
        self.calls += 1
        return value


@pytest.fixture
def failing_operation():
    """Factory fixture for FailingOperation.
    
    Usage:
        def test_something(failing_operation):
            op = failing_operation(failures=2)
    """
    return FailingOperation


@pytest.fixture
def sequence_operation():
    """Factory fixture for SequenceOperation.
    
    Usage:
        def test_something(sequence_operation):
            op = sequence_operation(-1, 42)
    """
    return SequenceOperation


def matches_test_message(error: Exception) -> bool:
    """Retry predicate used across tests: retry errors whose message starts with 'test'."""
    return str(error).startswith("test")


@pytest.fixture
def should_retry_test_errors():
    """Retry predicate accepting only errors whose message starts with 'test'."""
    return matches_test_message
