"""Flatten hand-authored YAML trees into plain mappings and lists.

Roster files often write a mapping as a list of one-key mappings::

    - armas:
        - Adaga
    - nivel: 3

`normalize` collapses such lists into a single mapping, recursively.
"""
from typing import Any, List

from .models import Character


class RosterError(ValueError):
    """The roster root does not have the expected shape."""


def is_singleton_mapping(value: Any) -> bool:
    return isinstance(value, dict) and len(value) == 1


def normalize(node: Any) -> Any:
    """Return a normalized copy of `node`.

    A non-empty list whose elements are all one-key mappings becomes one
    mapping (later keys overwrite earlier ones). Empty lists stay lists.
    Elements are normalized before the check, so the result is a fixed
    point: normalize(normalize(x)) == normalize(x).
    """
    if isinstance(node, list):
        items = [normalize(v) for v in node]
        if items and all(is_singleton_mapping(v) for v in items):
            out = {}
            for item in items:
                out.update(item)
            return out
        return items
    if isinstance(node, dict):
        return {k: normalize(v) for k, v in node.items()}
    return node


def parse_characters(root: Any) -> List[Character]:
    """Split the roster root into character records keyed by `id`."""
    if not isinstance(root, list):
        raise RosterError(f"roster root must be a list, got {type(root).__name__}")
    characters = []
    for entry in root:
        if not is_singleton_mapping(entry):
            raise RosterError(f"roster entry must be a one-key mapping: {entry!r}")
        (char_id, value), = entry.items()
        fields = normalize(value)
        if fields is None:
            fields = {}
        if not isinstance(fields, dict):
            raise RosterError(f"character {char_id!r} is not a mapping")
        # the top-level key always wins over any `id` field in the body
        record = {"id": char_id}
        record.update((k, v) for k, v in fields.items() if k != "id")
        characters.append(record)
    return characters
