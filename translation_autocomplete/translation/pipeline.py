"""
Detect and fill missing translations.

``fix`` handles one (key, language) pair at a time and writes the target
file after every successful translation, so an interrupted run keeps all
translations written so far. ``fix_batched`` translates all gaps of one
language through the BatchTranslator and writes that language once.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

import structlog

from ..config import Settings
from ..errors import ErrorContextManager, ProviderError, TranslationToolError
from ..localization import MissingEntry, Reconciler, ResourceStore, set_nested
from .batch import EMPTY_TRANSLATION, BatchTranslator
from .executor import RateLimitedExecutor

logger = structlog.get_logger()

TranslateOne = Callable[[str, str], Awaitable[str]]


@dataclass(frozen=True)
class ProgressEvent:
    """Emitted once per attempted (key, language) pair."""

    completed: int
    total: int
    current_key: str
    translation: Optional[str] = None
    language: Optional[str] = None


ProgressCallback = Callable[[ProgressEvent], None]


def as_tool_error(error: BaseException, language: str) -> TranslationToolError:
    """Wrap a foreign exception from a provider call in a chained ProviderError."""
    if isinstance(error, TranslationToolError):
        return error
    wrapped = ProviderError(str(error) or type(error).__name__, language=language, previous_error=error)
    wrapped.__cause__ = error
    return wrapped


@dataclass
class FixReport:
    """Everything a fix run produced."""

    entries: List[MissingEntry]
    total: int
    events: List[ProgressEvent] = field(default_factory=list)
    translations: Dict[str, Dict[str, str]] = field(default_factory=dict)
    failed: List[Tuple[str, str]] = field(default_factory=list)
    written: int = 0
    error_summary: Dict[str, Any] = field(default_factory=dict)

    def record(self, event: ProgressEvent) -> None:
        self.events.append(event)
        if event.translation:
            self.translations.setdefault(event.current_key, {})[event.language] = event.translation
        else:
            self.failed.append((event.current_key, event.language))

    @property
    def attempted(self) -> int:
        return len(self.events)

    @property
    def succeeded(self) -> int:
        return self.attempted - len(self.failed)

    def translation_for(self, key: str, language: str) -> Optional[str]:
        return self.translations.get(key, {}).get(language)


async def check_translations(
    settings: Settings,
    store: Optional[ResourceStore] = None,
    reconciler: Optional[Reconciler] = None,
) -> List[MissingEntry]:
    """Compare the source resource with every target resource.

    Raises:
        ValidationError: If the source file is missing, empty or not a file
        ReadError: If the source or a target file cannot be parsed
    """
    store = store or ResourceStore(settings.i18n_dir)
    reconciler = reconciler or Reconciler()

    store.validate(settings.source_language)
    source_tree = await store.load(settings.source_language)

    entries = await reconciler.check(source_tree, settings.target_languages, store.load)
    logger.info(
        "Translation check finished",
        source_language=settings.source_language,
        target_languages=settings.target_languages,
        missing=len(entries),
    )
    return entries


class FixPipeline:
    """Fills missing translations and writes them to the target files."""

    def __init__(
        self,
        settings: Settings,
        store: ResourceStore,
        translate_one: TranslateOne,
        executor: Optional[RateLimitedExecutor] = None,
        batch_translator: Optional[BatchTranslator] = None,
        error_context: Optional[ErrorContextManager] = None,
        reconciler: Optional[Reconciler] = None,
    ):
        self.settings = settings
        self.store = store
        self.translate_one = translate_one
        self.executor = executor or RateLimitedExecutor(
            max_attempts=settings.max_retries, delay=settings.rate_limit_delay
        )
        self.batch_translator = batch_translator or BatchTranslator(
            executor=self.executor,
            batch_size=settings.batch_size,
            delay=settings.rate_limit_delay,
        )
        self.error_context = error_context or ErrorContextManager()
        self.reconciler = reconciler or Reconciler()

    async def check(self) -> List[MissingEntry]:
        return await check_translations(self.settings, self.store, self.reconciler)

    def _total(self, entries: List[MissingEntry]) -> int:
        # Upper bound: assumes every entry is missing in every target language.
        return len(entries) * len(self.settings.target_languages)

    async def fix(self, on_progress: Optional[ProgressCallback] = None) -> FixReport:
        """Translate every missing (key, language) pair, one at a time."""
        entries = await self.check()
        report = FixReport(entries=entries, total=self._total(entries))
        completed = 0

        for entry in entries:
            for language in entry.missing_languages:
                tree = await self.store.load(language) or {}
                translation = await self._translate(entry, language)

                if translation:
                    set_nested(tree, entry.key, translation)
                    await self.store.save(language, tree)
                    report.written += 1

                completed += 1
                self._emit(report, on_progress, ProgressEvent(
                    completed=completed,
                    total=report.total,
                    current_key=entry.key,
                    translation=translation,
                    language=language,
                ))

        return self._finish(report)

    async def fix_batched(self, on_progress: Optional[ProgressCallback] = None) -> FixReport:
        """Translate the gaps of each language as one batch and write once per language."""
        entries = await self.check()
        report = FixReport(entries=entries, total=self._total(entries))
        completed = 0

        for language in dict.fromkeys(self.settings.target_languages):
            pending = [entry for entry in entries if language in entry.missing_languages]
            if not pending:
                continue

            results = await self.batch_translator.translate_batch(
                [entry.source_value for entry in pending], language, self.translate_one
            )

            tree = await self.store.load(language) or {}
            changed = False
            for entry, result in zip(pending, results):
                if result.ok:
                    set_nested(tree, entry.key, result.translation)
                    changed = True
                    report.written += 1
                elif result.error == EMPTY_TRANSLATION:
                    logger.warning("Empty translation", key=entry.key, language=language)
                else:
                    error = result.exception or ProviderError(result.error, language=language)
                    self._record_failure(as_tool_error(error, language), entry.key, language)

                completed += 1
                self._emit(report, on_progress, ProgressEvent(
                    completed=completed,
                    total=report.total,
                    current_key=entry.key,
                    translation=result.translation,
                    language=language,
                ))

            if changed:
                await self.store.save(language, tree)

        return self._finish(report)

    async def _translate(self, entry: MissingEntry, language: str) -> Optional[str]:
        """One translation for a pair, or None if none was produced."""
        try:
            translation = await self.executor.execute(
                lambda: self.translate_one(entry.source_value, language)
            )
        except Exception as e:
            self._record_failure(as_tool_error(e, language), entry.key, language)
            return None

        if not translation:
            logger.warning("Empty translation", key=entry.key, language=language)
            return None
        return translation

    def _record_failure(self, error: TranslationToolError, key: str, language: str) -> None:
        self.error_context.record_error(error, {"key": key, "language": language})
        if self.error_context.is_error_frequent("RateLimitExhaustedError"):
            logger.warning(
                "Provider keeps rate limiting, consider raising RATE_LIMIT_DELAY",
                delay=self.executor.delay,
            )

    @staticmethod
    def _emit(report: FixReport, on_progress: Optional[ProgressCallback], event: ProgressEvent) -> None:
        report.record(event)
        if on_progress:
            on_progress(event)

    def _finish(self, report: FixReport) -> FixReport:
        report.error_summary = self.error_context.get_error_stats()
        logger.info(
            "Fix finished",
            attempted=report.attempted,
            succeeded=report.succeeded,
            failed=len(report.failed),
            written=report.written,
        )
        return report
