"""
Retry engine exceptions.

This module defines the errors raised by the retry engine itself. Errors
raised by the retried operation are never wrapped in these types: they are
re-raised unchanged so callers can keep matching on their own exception
classes.
"""


class RetryEngineError(Exception):
    """
    Base exception for all errors raised by the retry engine.
    
    Allows catching any engine-level failure with a single except clause
    without also catching errors raised by the retried operation.
    """
    pass


class RetryConfigurationError(RetryEngineError, ValueError):
    """
    Raised when a retry session is configured with invalid arguments.
    
    Examples:
    - Negative maximum retry count
    - Negative initial sleep time
    - Unknown log level name
    
    Raised synchronously before the first attempt. It is never retried.
    """
    pass
