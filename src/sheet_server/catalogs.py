"""Resolve item names in character records against the item catalogs."""
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .models import NAME_KEY, Catalog, Character, InlineItem, ItemRef, to_item_ref

# category -> (file under the catalog dir, top key the catalog may be nested under)
CATALOG_SOURCES: Dict[str, Tuple[str, Optional[str]]] = {
    "armas": ("armas.yaml", None),
    "magias": ("magias.yaml", None),
    "tracos": ("tracos.yaml", None),
    "truques": ("truques.yaml", "truques"),
    "equipamentos": ("equipamentos.yaml", None),
}


def empty_catalogs() -> Dict[str, Catalog]:
    return {category: {} for category in CATALOG_SOURCES}


def unwrap_catalog(data: Any, top_key: Optional[str] = None) -> Any:
    """Return `data[top_key]` when the catalog is nested under it, else `data`."""
    if top_key and isinstance(data, dict) and data.get(top_key):
        return data[top_key]
    return data


def _resolve_ref(ref: ItemRef, catalog: Any) -> Any:
    if isinstance(ref, InlineItem):
        return ref.record
    item = catalog.get(ref.name) if isinstance(catalog, dict) else None
    if isinstance(item, dict):
        return item
    return {NAME_KEY: ref.name}


def resolve_selection(selection: Any, catalog: Any) -> Any:
    """Replace item names in `selection` with their catalog definitions.

    Inline mappings pass through untouched and names missing from the
    catalog become a ``{"nome": name}`` stub. Anything that is not a list
    (an empty value, or a mapping in the older format) is returned as is.
    The catalog is only read.
    """
    if not selection:
        return selection
    if not isinstance(selection, list):
        return selection
    return [_resolve_ref(to_item_ref(item), catalog) for item in selection]


def apply_catalogs(characters: Iterable[Character], catalogs: Dict[str, Catalog]) -> List[Character]:
    """Return copies of `characters` with every item category resolved."""
    resolved = []
    for character in characters:
        record = dict(character)
        for category in CATALOG_SOURCES:
            if category in record:
                record[category] = resolve_selection(record[category], catalogs.get(category))
        resolved.append(record)
    return resolved
