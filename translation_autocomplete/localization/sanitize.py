"""Turn arbitrary text into a safe identifier-like key."""

import re

from .flatten import DELIMITER

_UNSAFE = re.compile(r"[^\w\s-]")
_WHITESPACE = re.compile(r"\s+")


def sanitize_key(text: str) -> str:
    """Normalize ``text`` into a lowercase token.

    >>> sanitize_key("Hello.World! Test@123")
    'hello_world_test123'
    """
    text = text.replace(DELIMITER, "_")
    text = _UNSAFE.sub("", text)
    text = _WHITESPACE.sub("_", text)
    return text.lower().strip("_")
