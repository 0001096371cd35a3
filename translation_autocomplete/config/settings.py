"""Settings model for translation-autocomplete.

Values come from the process environment and from a ``.env`` file.
"""

from pathlib import Path
from typing import Annotated, List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

TranslationService = Literal["google", "deepl", "openai", "gemini"]

SUPPORTED_SERVICES = ("google", "deepl", "openai", "gemini")

DEFAULT_TARGET_LANGUAGES = ["tr", "fr", "de"]


class Settings(BaseSettings):
    """Runtime configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    api_key: str = Field(..., min_length=1, validation_alias="TRANSLATION_API_KEY")
    source_language: str = Field("en", validation_alias="SOURCE_LANGUAGE")
    target_languages: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_TARGET_LANGUAGES),
        validation_alias="TARGET_LANGUAGES",
    )
    translation_service: TranslationService = Field(
        "google", validation_alias="TRANSLATION_SERVICE"
    )
    i18n_path: str = Field("./src/messages", validation_alias="I18N_PATH")

    # Pacing and retry behaviour of the translation pipeline
    rate_limit_delay: float = Field(1.0, ge=0, validation_alias="RATE_LIMIT_DELAY")
    max_retries: int = Field(3, ge=1, validation_alias="MAX_RETRIES")
    batch_size: int = Field(10, ge=1, validation_alias="BATCH_SIZE")
    request_timeout: float = Field(10.0, gt=0, validation_alias="REQUEST_TIMEOUT")

    @field_validator("target_languages", mode="before")
    @classmethod
    def split_languages(cls, value):
        if isinstance(value, str):
            value = value.split(",")
        return [item.strip() for item in value if item and item.strip()]

    @field_validator("source_language", "i18n_path")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @property
    def i18n_dir(self) -> Path:
        """Resource directory resolved against the working directory."""
        return Path.cwd() / self.i18n_path
