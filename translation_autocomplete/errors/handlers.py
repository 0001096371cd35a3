"""
Error bookkeeping for long-running fix operations.

Provider failures never abort a run, so they are collected here and
summarized once the run finishes.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import structlog

from .exceptions import TranslationToolError

logger = structlog.get_logger(__name__)


class ErrorContextManager:
    """
    Keeps a bounded history of recorded errors.

    Tracks per-type counts and the last occurrence of each type so a run can
    report how many translations failed and why.
    """

    def __init__(self, max_history: int = 1000):
        self.max_history = max_history
        self.error_history: List[Dict[str, Any]] = []
        self.error_counts: Dict[str, int] = {}
        self.last_errors: Dict[str, datetime] = {}

    def record_error(self, error: TranslationToolError, context: Optional[Dict[str, Any]] = None):
        """Record an error occurrence with context."""
        error_record = {
            "timestamp": datetime.now(timezone.utc),
            "error_type": error.__class__.__name__,
            "message": error.message,
            "error_code": error.error_code,
            "context": {**error.context, **(context or {})},
            "is_retryable": error.is_retryable(),
        }

        self.error_history.append(error_record)

        if len(self.error_history) > self.max_history:
            self.error_history.pop(0)

        error_type = error.__class__.__name__
        self.error_counts[error_type] = self.error_counts.get(error_type, 0) + 1
        self.last_errors[error_type] = error_record["timestamp"]

        logger.warning(
            "Error recorded",
            error_type=error_type,
            message=error.message,
            context=error_record["context"],
            total_count=self.error_counts[error_type]
        )

    @property
    def total(self) -> int:
        return sum(self.error_counts.values())

    def get_error_stats(self) -> Dict[str, Any]:
        """Get error statistics."""
        return {
            "total_errors": self.total,
            "error_counts": self.error_counts.copy(),
            "most_common": max(self.error_counts.items(), key=lambda x: x[1]) if self.error_counts else None,
            "last_errors": {k: v.isoformat() for k, v in self.last_errors.items()},
        }

    def is_error_frequent(self, error_type: str, threshold: int = 5, window_minutes: int = 10) -> bool:
        """Check if an error type is occurring frequently."""
        window_start = datetime.now(timezone.utc) - timedelta(minutes=window_minutes)

        recent_count = sum(
            1 for e in self.error_history
            if e["error_type"] == error_type and e["timestamp"] >= window_start
        )

        return recent_count >= threshold
