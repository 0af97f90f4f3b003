"""Monitoring and metrics instrumentation for the retry engine.

Exports custom Prometheus metrics for operational monitoring and alerting.
"""

from retry_engine.monitoring.metrics import (
    retry_giveups_total,
    retry_sleep_seconds,
    retry_sleeps_total,
)

__all__ = [
    "retry_sleeps_total",
    "retry_sleep_seconds",
    "retry_giveups_total",
]
