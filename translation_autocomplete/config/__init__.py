"""Configuration for translation-autocomplete."""

from .loader import ensure_env_file, load_config, render_env, write_env_file
from .settings import SUPPORTED_SERVICES, Settings

__all__ = [
    "Settings",
    "SUPPORTED_SERVICES",
    "load_config",
    "ensure_env_file",
    "render_env",
    "write_env_file",
]
