"""
Unit tests for the error handling system.

Tests error hierarchy, the error ledger and the logging decorator.
"""

import pytest

from translation_autocomplete.errors import (
    TranslationToolError,
    TemporaryError,
    PermanentError,
    ConfigurationError,
    ValidationError,
    ReadError,
    ProviderError,
    RateLimitError,
    RateLimitExhaustedError,
    ErrorContextManager,
    log_errors,
)


class TestErrorHierarchy:
    """Test error class hierarchy."""

    def test_base_error_creation(self):
        error = TranslationToolError(
            message="Test error",
            error_code="TEST_ERROR",
            user_message="User friendly message"
        )

        assert error.message == "Test error"
        assert error.error_code == "TEST_ERROR"
        assert error.user_message == "User friendly message"
        assert error.timestamp is not None
        assert isinstance(error.context, dict)

    def test_error_to_dict(self):
        error = TranslationToolError(
            message="Test error",
            error_code="TEST_ERROR",
            context={"key": "value"}
        )

        error_dict = error.to_dict()

        assert error_dict["error_type"] == "TranslationToolError"
        assert error_dict["message"] == "Test error"
        assert error_dict["context"]["key"] == "value"
        assert "timestamp" in error_dict

    def test_temporary_and_permanent(self):
        assert TemporaryError("Temporary issue").is_retryable()
        assert not PermanentError("Permanent issue").is_retryable()

    def test_structural_errors_require_user_action(self):
        assert ConfigurationError("Invalid config", config_key="api_key").requires_user_action()
        assert ValidationError("File not found: en.json", file_path="en.json").requires_user_action()
        assert ReadError("bad json", language="tr").requires_user_action()
        assert not ProviderError("failed").requires_user_action()

    def test_configuration_error_context(self):
        error = ConfigurationError("Invalid config", config_key="api_key")

        assert error.context["config_key"] == "api_key"
        assert "configuration error" in error.user_message.lower()

    def test_read_error_context(self):
        error = ReadError("Could not read tr.json", language="tr", file_path="/x/tr.json")

        assert error.context == {"language": "tr", "file_path": "/x/tr.json"}
        assert error.user_message == "Could not read tr.json"

    def test_provider_error(self):
        error = ProviderError("HTTP 500", service="deepl", language="fr", status=500)

        assert error.status == 500
        assert error.context["service"] == "deepl"
        assert not error.is_retryable()

    def test_rate_limit_errors(self):
        error = RateLimitError("slow down", service="google", retry_after=30)

        assert isinstance(error, ProviderError)
        assert isinstance(error, TemporaryError)
        assert error.is_retryable()
        assert error.status == 429
        assert error.retry_after == 30
        assert error.user_message == "Translation failed."
        assert error.context["service"] == "google"

        exhausted = RateLimitExhaustedError("gave up", attempts=3, previous_error=error)

        assert isinstance(exhausted, RateLimitError)
        assert not exhausted.is_retryable()
        assert exhausted.context["attempts"] == 3


class TestErrorContextManager:
    """Test ErrorContextManager functionality."""

    def test_error_recording(self):
        manager = ErrorContextManager()
        error = ProviderError("Test error", language="tr")

        manager.record_error(error, {"key": "home.title"})

        assert len(manager.error_history) == 1
        record = manager.error_history[0]
        assert record["error_type"] == "ProviderError"
        assert record["context"]["key"] == "home.title"
        assert record["context"]["language"] == "tr"

    def test_error_counts_and_stats(self):
        manager = ErrorContextManager()

        manager.record_error(ProviderError("a"))
        manager.record_error(ProviderError("b"))
        manager.record_error(RateLimitExhaustedError("c"))

        stats = manager.get_error_stats()
        assert manager.total == 3
        assert stats["total_errors"] == 3
        assert stats["error_counts"] == {"ProviderError": 2, "RateLimitExhaustedError": 1}
        assert stats["most_common"] == ("ProviderError", 2)

    def test_frequent_error_detection(self):
        manager = ErrorContextManager()

        for _ in range(6):
            manager.record_error(RateLimitExhaustedError("throttled"))

        assert manager.is_error_frequent("RateLimitExhaustedError", threshold=5, window_minutes=10)
        assert not manager.is_error_frequent("RateLimitExhaustedError", threshold=10, window_minutes=10)

    def test_history_limit(self):
        manager = ErrorContextManager(max_history=3)

        for i in range(5):
            manager.record_error(TranslationToolError(f"Error {i}"))

        assert len(manager.error_history) == 3
        assert manager.error_history[-1]["message"] == "Error 4"
        assert manager.total == 5


class TestLogErrorsDecorator:
    """Test log_errors decorator."""

    async def test_async_reraises(self):
        @log_errors()
        async def failing():
            raise ReadError("broken")

        with pytest.raises(ReadError):
            await failing()

    async def test_async_passthrough(self):
        @log_errors()
        async def working():
            return 42

        assert await working() == 42

    def test_sync_swallow_when_configured(self):
        @log_errors(level="warning", reraise=False)
        def failing():
            raise ValueError("nope")

        assert failing() is None
