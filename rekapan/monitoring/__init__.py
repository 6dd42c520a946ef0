"""
Error monitoring package
"""

from .error_handler import (
    GENERIC_FAILURE_MESSAGE,
    CommandError,
    ErrorCategory,
    ErrorHandler,
    ErrorSeverity,
    classify
)

__all__ = [
    'GENERIC_FAILURE_MESSAGE',
    'CommandError',
    'ErrorCategory',
    'ErrorHandler',
    'ErrorSeverity',
    'classify'
]
