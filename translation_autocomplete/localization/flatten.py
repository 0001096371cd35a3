"""Conversion between nested translation trees and dotted-path keys.

A key whose own name contains the delimiter (``{"a.b": "x"}``) flattens to the
same dotted path as a nested ``{"a": {"b": "x"}}``. The two cannot be told
apart once flattened, and ``set_nested`` always writes the nested form.
"""

from typing import Any, Dict

DELIMITER = "."


def flatten(tree: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flatten a nested tree into ``{dotted.key: leaf}``.

    Dicts are descended into. Anything else, lists included, is a leaf.
    Keys keep the depth-first insertion order of the tree.
    """
    flat: Dict[str, Any] = {}
    for key, value in tree.items():
        path = f"{prefix}{DELIMITER}{key}" if prefix else key
        if isinstance(value, dict):
            flat.update(flatten(value, path))
        else:
            flat[path] = value
    return flat


def set_nested(tree: Dict[str, Any], flat_key: str, value: Any) -> None:
    """Assign ``value`` at ``flat_key`` inside ``tree``, creating levels as needed.

    An intermediate position that holds a leaf is replaced by an empty dict.
    """
    *parents, last = flat_key.split(DELIMITER)
    current = tree
    for segment in parents:
        if not isinstance(current.get(segment), dict):
            current[segment] = {}
        current = current[segment]
    current[last] = value

