"""Translation trees: flattening, key sanitizing, storage and reconciliation."""

from .flatten import DELIMITER, flatten, set_nested
from .reconciler import MissingEntry, Reconciler
from .sanitize import sanitize_key
from .storage import ResourceStore

__all__ = [
    "DELIMITER",
    "flatten",
    "set_nested",
    "sanitize_key",
    "MissingEntry",
    "Reconciler",
    "ResourceStore",
]
