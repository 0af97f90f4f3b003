"""Custom Prometheus metrics for the retry engine.

These metrics are registered in the default prometheus_client registry and are
exposed by whatever /metrics endpoint the embedding application serves.
Alert rules should be configured for:
- retry_giveups_total{reason!="accepted"} (sessions that ended without success or acceptance)
- retry_sleeps_total (high retry rate indicates an unstable dependency)
"""

from prometheus_client import Counter, Histogram

# === Retry Metrics ===

retry_sleeps_total = Counter(
    "retry_sleeps_total",
    "Total delays scheduled before a retry attempt, by retry mode",
    ["mode"],
)
"""
Scheduled retries counter by mode.

Labels:
- mode: exception (failure-triggered retry), condition (condition-triggered retry)

Immediate retries (zero delay) are counted too.
"""

retry_sleep_seconds = Histogram(
    "retry_sleep_seconds",
    "Requested delay before a retry attempt in seconds",
    ["mode"],
    buckets=[0, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 300.0],
)
"""
Delay duration histogram by mode.

Buckets range from immediate retries up to five minute waits.
"""

# === Give-up Metrics ===

retry_giveups_total = Counter(
    "retry_giveups_total",
    "Total retry sessions stopped by the decision function, by mode and reason",
    ["mode", "reason"],
)
"""
Stop decisions counter.

Labels:
- mode: exception, condition
- reason: not_retryable (exception predicate declined), exhausted (retry budget used up),
  accepted (condition predicate accepted the value)

Condition-triggered sessions never report not_retryable: a value the predicate
declines to retry is a success and is counted as accepted.
"""
