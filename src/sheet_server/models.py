"""Schemaless character model plus the item-reference variant.

Character records come from hand-written YAML and stay plain mappings.
Item references are the one place where the shape matters, so they are
lifted into a small tagged variant before resolution.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Union

# Character is a schemaless mapping of keys to values parsed from YAML
Character = Dict[str, Any]
# Catalog maps an item name to its definition
Catalog = Dict[str, Any]

# Name field used by the data files
NAME_KEY = "nome"


@dataclass(frozen=True)
class ItemName:
    """A bare item name to be looked up in a catalog."""
    name: str


@dataclass(frozen=True)
class InlineItem:
    """An item already written out in full in the roster."""
    record: Any


ItemRef = Union[ItemName, InlineItem]


def to_item_ref(value: Any) -> ItemRef:
    if isinstance(value, str):
        return ItemName(value)
    return InlineItem(value)


@dataclass
class Book:
    """Resolved roster together with the catalogs it was resolved against."""
    characters: List[Character]
    catalogs: Dict[str, Catalog]

    def find(self, character_id: str) -> Character | None:
        for c in self.characters:
            if str(c.get("id")) == str(character_id):
                return c
        return None
