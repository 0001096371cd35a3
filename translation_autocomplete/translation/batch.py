"""Chunked, paced translation of many texts into one language."""

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Sequence

import structlog

from .executor import RateLimitedExecutor

logger = structlog.get_logger(__name__)

TranslateOne = Callable[[str, str], Awaitable[str]]

EMPTY_TRANSLATION = "Empty translation"


@dataclass(frozen=True)
class BatchResult:
    """Outcome of translating one text. Exactly one of translation/error is set."""

    source_text: str
    translation: Optional[str] = None
    error: Optional[str] = None
    exception: Optional[BaseException] = field(default=None, compare=False, repr=False)

    @property
    def ok(self) -> bool:
        return self.translation is not None


class BatchTranslator:
    """
    Translates texts in fixed-size chunks.

    Calls inside a chunk run concurrently and all of them settle before the
    next chunk starts. Chunks are separated by a fixed pause.
    """

    def __init__(
        self,
        executor: Optional[RateLimitedExecutor] = None,
        batch_size: int = 10,
        delay: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.executor = executor or RateLimitedExecutor(delay=delay, sleep=sleep)
        self.batch_size = batch_size
        self.delay = delay
        self._sleep = sleep

    def chunks(self, texts: Sequence[str]) -> List[Sequence[str]]:
        return [texts[i:i + self.batch_size] for i in range(0, len(texts), self.batch_size)]

    async def translate_batch(
        self,
        texts: Sequence[str],
        target_language: str,
        translate_one: TranslateOne,
    ) -> List[BatchResult]:
        """Translate ``texts`` into ``target_language``, keeping input order."""
        results: List[BatchResult] = []
        chunks = self.chunks(texts)

        for index, chunk in enumerate(chunks):
            logger.debug(
                "Translating chunk",
                language=target_language,
                chunk=index + 1,
                chunks=len(chunks),
                size=len(chunk),
            )
            outcomes = await asyncio.gather(
                *(self._translate(text, target_language, translate_one) for text in chunk),
                return_exceptions=True,
            )
            results.extend(self._to_result(text, outcome) for text, outcome in zip(chunk, outcomes))

            if index < len(chunks) - 1:
                await self._sleep(self.delay)

        failed = sum(1 for result in results if not result.ok)
        if failed:
            logger.warning("Batch finished with failures", language=target_language, failed=failed, total=len(results))
        return results

    async def _translate(self, text: str, target_language: str, translate_one: TranslateOne) -> str:
        return await self.executor.execute(lambda: translate_one(text, target_language))

    @staticmethod
    def _to_result(text: str, outcome) -> BatchResult:
        if isinstance(outcome, BaseException):
            return BatchResult(source_text=text, error=str(outcome) or type(outcome).__name__, exception=outcome)
        if not outcome:
            return BatchResult(source_text=text, error=EMPTY_TRANSLATION)
        return BatchResult(source_text=text, translation=outcome)
