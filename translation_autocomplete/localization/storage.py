"""Resource files: one ``{language}.json`` per language in the i18n directory."""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import aiofiles
import structlog

from ..errors import ReadError, ValidationError

logger = structlog.get_logger()


class ResourceStore:
    """Reads and writes the translation tree of each language."""

    def __init__(self, i18n_path: Union[str, Path]):
        self.root = Path(i18n_path)
        self.logger = logger.bind(component="resource_store", root=str(self.root))

    def path_for(self, language: str) -> Path:
        return self.root / f"{language}.json"

    def validate(self, language: str) -> Path:
        """Check that a resource file exists, is a regular file and is not empty.

        Raises:
            ValidationError: If any of the checks fails
        """
        path = self.path_for(language)
        try:
            stats = path.stat()
        except FileNotFoundError as e:
            raise ValidationError(f"File not found: {path}", file_path=str(path)) from e
        except OSError as e:
            raise ValidationError(f"File validation error: {e}", file_path=str(path)) from e

        if not path.is_file():
            raise ValidationError(f"Invalid file: {path}", file_path=str(path))
        if stats.st_size == 0:
            raise ValidationError(f"Empty file: {path}", file_path=str(path))
        return path

    async def load(self, language: str) -> Optional[Dict[str, Any]]:
        """Load the tree for ``language``.

        Returns:
            The parsed tree, or None if the file does not exist

        Raises:
            ReadError: If the file exists but cannot be read or parsed
        """
        path = self.path_for(language)
        if not path.exists():
            return None

        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                content = await f.read()
            tree = json.loads(content)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ReadError(
                f"Could not read {path}: {e}",
                language=language,
                file_path=str(path),
                previous_error=e,
            ) from e

        if not isinstance(tree, dict):
            raise ReadError(
                f"Could not read {path}: top-level value must be an object",
                language=language,
                file_path=str(path),
            )

        self.logger.debug("Resource loaded", language=language, file=str(path))
        return tree

    async def save(self, language: str, tree: Dict[str, Any]) -> Path:
        """Write the tree for ``language`` with 2-space indentation."""
        path = self.path_for(language)
        path.parent.mkdir(parents=True, exist_ok=True)

        async with aiofiles.open(path, "w", encoding="utf-8") as f:
            await f.write(json.dumps(tree, ensure_ascii=False, indent=2) + "\n")

        self.logger.debug("Resource saved", language=language, file=str(path))
        return path
