"""Find source keys that target languages are missing."""

import json
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional

import structlog

from .flatten import flatten

logger = structlog.get_logger()

TreeLoader = Callable[[str], Awaitable[Optional[Dict[str, Any]]]]


@dataclass
class MissingEntry:
    """A source key together with every target language that lacks it."""

    key: str
    source_value: str
    missing_languages: List[str] = field(default_factory=list)


def leaf_text(value: Any) -> str:
    """Text sent for translation for a source leaf."""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def is_missing(flat_target: Dict[str, Any], key: str) -> bool:
    """A key is missing when absent or left as an empty string or null."""
    return key not in flat_target or flat_target[key] in ("", None)


class Reconciler:
    """Diffs a source tree against the trees of the target languages."""

    async def check(
        self,
        source_tree: Dict[str, Any],
        target_languages: Iterable[str],
        loader: TreeLoader,
    ) -> List[MissingEntry]:
        """Collect one MissingEntry per source key absent from any target.

        Entries follow the flattened order of the source tree. Each entry's
        ``missing_languages`` follows the order of ``target_languages``.

        Raises:
            ReadError: Propagated from ``loader`` when a target file is corrupt
        """
        flat_source = flatten(source_tree)
        entries: Dict[str, MissingEntry] = {}
        scanned: List[str] = []

        for language in target_languages:
            if language in scanned:
                continue
            scanned.append(language)

            target_tree = await loader(language)
            if target_tree is None:
                logger.info("Target resource missing, every key is missing", language=language)
                flat_target: Dict[str, Any] = {}
            else:
                flat_target = flatten(target_tree)

            missing_count = 0
            for key in flat_source:
                if not is_missing(flat_target, key):
                    continue
                entry = entries.get(key)
                if entry is None:
                    entry = entries[key] = MissingEntry(key=key, source_value=leaf_text(flat_source[key]))
                entry.missing_languages.append(language)
                missing_count += 1

            logger.debug("Language scanned", language=language, missing=missing_count)

        # Source order, not discovery order.
        return [entries[key] for key in flat_source if key in entries]
