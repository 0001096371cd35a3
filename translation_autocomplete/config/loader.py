"""Configuration loading from the environment and ``.env`` files."""

from pathlib import Path
from typing import Any, Mapping, Optional, Union

import structlog
from pydantic import ValidationError as PydanticValidationError

from ..errors import ConfigurationError
from .settings import DEFAULT_TARGET_LANGUAGES, Settings

logger = structlog.get_logger()

# Settings field -> environment variable, in the order written to .env
ENV_KEYS = {
    "api_key": "TRANSLATION_API_KEY",
    "source_language": "SOURCE_LANGUAGE",
    "target_languages": "TARGET_LANGUAGES",
    "translation_service": "TRANSLATION_SERVICE",
    "i18n_path": "I18N_PATH",
}

DEFAULT_ENV_VALUES = {
    "api_key": "",
    "source_language": "en",
    "target_languages": DEFAULT_TARGET_LANGUAGES,
    "translation_service": "google",
    "i18n_path": "./src/messages",
}


def render_env(values: Mapping[str, Any]) -> str:
    """Render the user-facing settings in ``.env`` format."""
    lines = []
    for field_name, env_name in ENV_KEYS.items():
        value = values.get(field_name, DEFAULT_ENV_VALUES[field_name])
        if isinstance(value, (list, tuple)):
            value = ",".join(value)
        lines.append(f"{env_name}={value}")
    return "\n".join(lines) + "\n"


def write_env_file(path: Union[str, Path], values: Mapping[str, Any]) -> Path:
    """Write settings to an env file, replacing its contents."""
    env_path = Path(path)
    env_path.write_text(render_env(values), encoding="utf-8")
    logger.info("Configuration written", file=str(env_path))
    return env_path


def ensure_env_file(path: Union[str, Path]) -> bool:
    """Create an env file with default values if it does not exist.

    Returns:
        True if the file was created
    """
    env_path = Path(path)
    if env_path.exists():
        return False

    logger.warning("Env file not found, creating it with default settings", file=str(env_path))
    write_env_file(env_path, DEFAULT_ENV_VALUES)
    return True


def load_config(
    env_file: Optional[Union[str, Path]] = ".env",
    create_if_missing: bool = True,
    **overrides: Any,
) -> Settings:
    """Load and validate settings.

    Args:
        env_file: Env file to read, or None to only use the process environment
        create_if_missing: Write a default env file when it does not exist
        **overrides: Explicit field values that take precedence over the environment

    Raises:
        ConfigurationError: If any setting is missing or invalid
    """
    if env_file is not None and create_if_missing:
        ensure_env_file(env_file)

    try:
        settings = Settings(_env_file=env_file, **overrides)
    except PydanticValidationError as e:
        first = e.errors()[0]
        config_key = ".".join(str(part) for part in first["loc"]) or None
        raise ConfigurationError(
            f"{config_key}: {first['msg']}" if config_key else first["msg"],
            config_key=config_key,
            previous_error=e,
        ) from e

    logger.debug(
        "Configuration loaded",
        source_language=settings.source_language,
        target_languages=settings.target_languages,
        translation_service=settings.translation_service,
        i18n_path=settings.i18n_path,
    )
    return settings
