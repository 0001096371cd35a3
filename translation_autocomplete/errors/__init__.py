"""
Error handling for translation-autocomplete.

- Structured error hierarchy
- Error ledger for per-item provider failures
- Logging decorator for command runners
"""

from .exceptions import (
    TranslationToolError,
    TemporaryError,
    PermanentError,
    ConfigurationError,
    ValidationError,
    ReadError,
    ProviderError,
    RateLimitError,
    RateLimitExhaustedError,
)

from .handlers import ErrorContextManager

from .decorators import log_errors

__all__ = [
    # Exceptions
    "TranslationToolError",
    "TemporaryError",
    "PermanentError",
    "ConfigurationError",
    "ValidationError",
    "ReadError",
    "ProviderError",
    "RateLimitError",
    "RateLimitExhaustedError",

    # Handlers
    "ErrorContextManager",

    # Decorators
    "log_errors",
]
