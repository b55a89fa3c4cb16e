"""Build the static sheet page from the data files."""
from pathlib import Path
from typing import Optional
import logging

import requests
import yaml

from . import config
from .loader import Source, load_book
from .normalize import RosterError
from .render import render_error, render_page

LOG = logging.getLogger(__name__)


async def build_page(roster: Optional[Source] = None, catalog_dir: Optional[Source] = None,
                     image_dir: Optional[str] = None) -> str:
    """Render every character, or a single error message if the roster can't be loaded."""
    try:
        book = await load_book(roster, catalog_dir)
    except (OSError, requests.RequestException, yaml.YAMLError, RosterError) as ex:
        LOG.exception("Failed to load roster")
        return render_error(ex)
    return render_page(book.characters, image_dir or config.IMAGE_DIR)


async def write_page(out: Path, roster: Optional[Source] = None, catalog_dir: Optional[Source] = None,
                     image_dir: Optional[str] = None) -> Path:
    html = await build_page(roster, catalog_dir, image_dir)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(html, encoding="utf-8")
    LOG.info("Wrote %s", out)
    return out
