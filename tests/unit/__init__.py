"""
Unit tests for the retry engine.

Test individual components in isolation (sleeps are recorded, not performed):
- Backoff strategies (growth, clamping, parameter validation)
- Decision function (stop order, initial vs strategy delay)
- Retry loops (sync and async, exception and condition modes)
- Settings, logging configuration and metrics
"""
