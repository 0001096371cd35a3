"""Provider calls, retries, batching and the fix pipeline."""

from .batch import BatchResult, BatchTranslator
from .executor import RateLimitedExecutor, is_rate_limited
from .pipeline import FixPipeline, FixReport, ProgressEvent, check_translations
from .providers import TranslationProvider, create_provider, translate_text

__all__ = [
    "BatchResult",
    "BatchTranslator",
    "RateLimitedExecutor",
    "is_rate_limited",
    "FixPipeline",
    "FixReport",
    "ProgressEvent",
    "check_translations",
    "TranslationProvider",
    "create_provider",
    "translate_text",
]
