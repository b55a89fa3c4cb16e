"""Load the roster and item catalogs from local files or http(s) URLs.

`load_book` is the whole page-load step: roster, then the five catalogs
fetched concurrently, then resolution. Roster failures propagate; catalog
failures degrade to empty catalogs for every category at once.
"""
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import asyncio
import logging

import requests
import yaml

from . import config
from .catalogs import CATALOG_SOURCES, apply_catalogs, empty_catalogs, unwrap_catalog
from .models import Book, Catalog, Character
from .normalize import normalize, parse_characters

LOG = logging.getLogger(__name__)

Source = Union[str, Path]


def is_url(source: Source) -> bool:
    return isinstance(source, str) and source.startswith(("http://", "https://"))


def join_source(base: Source, name: str) -> Source:
    """Append a file name to a directory path or a base URL."""
    if is_url(base):
        return f"{str(base).rstrip('/')}/{name}"
    return Path(base) / name


def read_source(source: Source) -> bytes:
    """Return the raw bytes; decoding is left to the YAML reader."""
    if is_url(source):
        resp = requests.get(str(source), timeout=config.HTTP_TIMEOUT)
        resp.raise_for_status()
        return resp.content
    p = Path(source)
    if not p.exists():
        raise FileNotFoundError(p)
    return p.read_bytes()


def load_yaml(source: Source) -> Any:
    return yaml.safe_load(read_source(source))


def load_roster(source: Source) -> List[Character]:
    return parse_characters(load_yaml(source))


def load_catalog(source: Source, top_key: Optional[str] = None) -> Catalog:
    return unwrap_catalog(normalize(load_yaml(source)), top_key)


async def load_catalogs(catalog_dir: Source) -> Dict[str, Catalog]:
    """Load every catalog concurrently; any failure empties all of them."""
    categories = list(CATALOG_SOURCES)
    loads = [
        asyncio.to_thread(load_catalog, join_source(catalog_dir, filename), top_key)
        for filename, top_key in CATALOG_SOURCES.values()
    ]
    try:
        results = await asyncio.gather(*loads)
    except (OSError, requests.RequestException, yaml.YAMLError) as ex:
        LOG.warning("Failed to load catalogs from %s: %s", catalog_dir, ex)
        return empty_catalogs()
    return dict(zip(categories, results))


async def load_book(roster: Optional[Source] = None, catalog_dir: Optional[Source] = None) -> Book:
    """Load the roster and catalogs and resolve every character's items."""
    roster = roster or default_roster()
    catalog_dir = catalog_dir or default_catalog_dir()
    characters = await asyncio.to_thread(load_roster, roster)
    catalogs = await load_catalogs(catalog_dir)
    LOG.info("Loaded %d characters from %s", len(characters), roster)
    return Book(characters=apply_catalogs(characters, catalogs), catalogs=catalogs)


def default_roster() -> Source:
    return config.DATA_DIR / config.ROSTER_FILE


def default_catalog_dir() -> Source:
    return config.CATALOG_DIR
