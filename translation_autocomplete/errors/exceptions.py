"""
Error hierarchy for translation-autocomplete.

Structural errors (bad configuration, missing or corrupt resource files) are
permanent and abort a run. Provider errors are recorded per (key, language)
pair and never abort a run.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


class TranslationToolError(Exception):
    """
    Base exception for all translation-autocomplete errors.

    Carries a machine-readable error code, a context dict for structured
    logging, and a short message suitable for showing on the console.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
        retry_after: Optional[float] = None,
        previous_error: Optional[Exception] = None,
    ):
        super().__init__(message)

        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.context = context or {}
        self.user_message = user_message or message
        self.retry_after = retry_after
        self.previous_error = previous_error
        self.timestamp = datetime.now(timezone.utc)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "user_message": self.user_message,
            "retry_after": self.retry_after,
            "timestamp": self.timestamp.isoformat(),
            "previous_error": str(self.previous_error) if self.previous_error else None,
        }

    def is_retryable(self) -> bool:
        """Determine if this error should trigger a retry."""
        return isinstance(self, TemporaryError)

    def requires_user_action(self) -> bool:
        """Determine if this error requires user intervention."""
        return isinstance(self, (ConfigurationError, ValidationError, ReadError))


class TemporaryError(TranslationToolError):
    """Base class for temporary errors that may succeed when retried."""

    def __init__(self, message: str, retry_after: float = 1.0, **kwargs):
        super().__init__(message, retry_after=retry_after, **kwargs)


class PermanentError(TranslationToolError):
    """Base class for permanent errors that should not be retried."""
    pass


class ConfigurationError(PermanentError):
    """Invalid or incomplete settings."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        super().__init__(
            message,
            context={"config_key": config_key},
            user_message=f"Configuration error: {message}",
            **kwargs
        )


class ValidationError(PermanentError):
    """A required resource file is missing, empty or not a regular file."""

    def __init__(self, message: str, file_path: Optional[str] = None, **kwargs):
        super().__init__(
            message,
            context={"file_path": file_path},
            **kwargs
        )


class ReadError(PermanentError):
    """A resource file exists but cannot be read or parsed."""

    def __init__(
        self,
        message: str,
        language: Optional[str] = None,
        file_path: Optional[str] = None,
        **kwargs
    ):
        super().__init__(
            message,
            context={"language": language, "file_path": file_path},
            **kwargs
        )


class ProviderError(TranslationToolError):
    """A translation request failed."""

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        language: Optional[str] = None,
        status: Optional[int] = None,
        **kwargs
    ):
        context = kwargs.pop("context", {})
        context.update({"service": service, "language": language, "status": status})
        super().__init__(
            message,
            context=context,
            user_message="Translation failed.",
            **kwargs
        )
        self.status = status


class RateLimitError(ProviderError, TemporaryError):
    """The provider asked us to slow down (HTTP 429 or equivalent)."""

    def __init__(self, message: str, status: Optional[int] = 429, **kwargs):
        super().__init__(message, status=status, **kwargs)


class RateLimitExhaustedError(RateLimitError):
    """Still rate limited after the last allowed attempt."""

    def __init__(self, message: str, attempts: int = 0, **kwargs):
        super().__init__(message, **kwargs)
        self.attempts = attempts
        self.context["attempts"] = attempts

    def is_retryable(self) -> bool:
        return False
