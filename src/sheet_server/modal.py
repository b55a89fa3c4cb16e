"""Detail-view state and the click / keyboard dispatch around it.

The state is an immutable value: every handler takes the current state and
returns the next one, so nothing here depends on a page being present.
"""
from dataclasses import dataclass, replace
from typing import Iterable, Optional

from .models import Character
from .render import DETAIL_VIEWS, REFERENCE_TABLES, character_name, reference_table_content


@dataclass(frozen=True)
class ModalState:
    title: str = ""
    content: str = ""
    hidden: bool = True


def open_modal(title: str, html: str) -> ModalState:
    return ModalState(title=title, content=html, hidden=False)


def close_modal(state: ModalState) -> ModalState:
    return replace(state, hidden=True)


def handle_key(state: ModalState, key: str) -> ModalState:
    if key == "Escape":
        return close_modal(state)
    return state


def dispatch_action(characters: Iterable[Character], char_id: str, action: str) -> Optional[ModalState]:
    """Open the `action` detail view for the character with id `char_id`.

    Returns None when either the character or the action is unknown.
    """
    view = DETAIL_VIEWS.get(action)
    if view is None:
        return None
    character = next((c for c in characters if str(c.get("id")) == str(char_id)), None)
    if character is None:
        return None
    title, builder = view
    return open_modal(f"{title} — {character_name(character)}", builder(character))


def reference_table(kind: str, image_dir: str = "img") -> Optional[ModalState]:
    if kind not in REFERENCE_TABLES:
        return None
    return open_modal(REFERENCE_TABLES[kind][0], reference_table_content(kind, image_dir))
