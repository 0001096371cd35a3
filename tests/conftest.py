"""
Pytest configuration and fixtures for translation-autocomplete tests.
"""

import json
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator

import pytest

from translation_autocomplete.config import Settings
from translation_autocomplete.localization import ResourceStore


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def i18n_dir(temp_dir: Path) -> Path:
    """Resource directory inside the temporary directory."""
    path = temp_dir / "messages"
    path.mkdir()
    return path


@pytest.fixture
def make_settings(i18n_dir: Path, monkeypatch):
    """Factory for settings that ignore the real environment and .env files."""
    for name in (
        "TRANSLATION_API_KEY", "SOURCE_LANGUAGE", "TARGET_LANGUAGES", "TRANSLATION_SERVICE",
        "I18N_PATH", "RATE_LIMIT_DELAY", "MAX_RETRIES", "BATCH_SIZE", "REQUEST_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)

    def _make(**overrides: Any) -> Settings:
        values = {
            "api_key": "test-key",
            "source_language": "en",
            "target_languages": ["tr", "fr"],
            "i18n_path": str(i18n_dir),
            "rate_limit_delay": 0,
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def test_settings(make_settings) -> Settings:
    """Default test configuration."""
    return make_settings()


@pytest.fixture
def store(i18n_dir: Path) -> ResourceStore:
    return ResourceStore(i18n_dir)


@pytest.fixture
def write_locale(i18n_dir: Path):
    """Helper to create resource files."""
    def _write(language: str, tree: Dict[str, Any]) -> Path:
        path = i18n_dir / f"{language}.json"
        path.write_text(json.dumps(tree, ensure_ascii=False), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def read_locale(i18n_dir: Path):
    """Helper to read resource files back."""
    def _read(language: str) -> Dict[str, Any]:
        return json.loads((i18n_dir / f"{language}.json").read_text(encoding="utf-8"))
    return _read


@pytest.fixture
def source_tree() -> Dict[str, Any]:
    """Sample source resource."""
    return {"home": {"title": "Welcome", "description": "Hello World"}}


@pytest.fixture
def no_sleep():
    """Sleep replacement that records requested delays without waiting."""
    delays = []

    async def _sleep(seconds: float) -> None:
        delays.append(seconds)

    _sleep.delays = delays
    return _sleep
