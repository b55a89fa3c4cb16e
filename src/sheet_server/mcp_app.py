"""FastMCP integration: register MCP tools that expose the character sheets.

Run in dev with:

    python -m sheet_server.mcp_app

Tools:
- list_characters() -> {count, characters}
- get_character(character_id) -> resolved character record
- open_detail(character_id, action) -> {title, content} for a detail view
- open_reference_table(kind) -> {title, content} for a reference image
- render_sheets() -> full HTML page
- fetch_data(base_url) -> trigger downloader

Every call reloads the data files, so edits show up without a restart.
"""
from fastmcp import FastMCP
from dataclasses import asdict
from pathlib import Path
import argparse
import asyncio
import logging
import sys
import requests
from . import config, downloader
from .loader import load_book
from .modal import dispatch_action, reference_table
from .page import build_page, write_page
from .render import DETAIL_VIEWS, character_name, render_card

LOG = logging.getLogger(__name__)

mcp = FastMCP("sheetbook-mcp")


@mcp.tool
async def list_characters() -> dict:
    """Return a summary of the characters in the roster."""
    book = await load_book()
    entries = [
        {
            "id": c["id"],
            "name": character_name(c),
            "classe": c.get("classe"),
            "nivel": c.get("nivel", c.get("nível")),
        }
        for c in book.characters
    ]
    return {"count": len(entries), "characters": entries}


@mcp.tool
async def get_character(character_id: str) -> dict:
    """Return one character with its item lists resolved against the catalogs."""
    book = await load_book()
    character = book.find(character_id)
    if character is None:
        raise ValueError(f"Unknown character: {character_id}")
    return character


@mcp.tool
async def open_detail(character_id: str, action: str) -> dict:
    """Return the detail view (title and HTML) for one of a character's item lists.

    `action` is one of: armas, magias, truques, equipamentos, tracos.
    """
    if action not in DETAIL_VIEWS:
        raise ValueError(f"Unknown action {action!r}; expected one of {', '.join(DETAIL_VIEWS)}")
    book = await load_book()
    state = dispatch_action(book.characters, character_id, action)
    if state is None:
        raise ValueError(f"Unknown character: {character_id}")
    return asdict(state)


@mcp.tool
def open_reference_table(kind: str) -> dict:
    """Return the weapons (`armas`) or armour (`armaduras`) reference table."""
    state = reference_table(kind, config.IMAGE_DIR)
    if state is None:
        raise ValueError(f"Unknown reference table: {kind}")
    return asdict(state)


@mcp.tool
async def render_sheets() -> str:
    """Return the whole sheet page as HTML."""
    return await build_page()


@mcp.tool
async def fetch_data(base_url: str | None = None) -> dict:
    """Download the roster and catalogs from `base_url` (or DATA_BASE_URL)."""
    written = await asyncio.to_thread(downloader.fetch_all, base_url)
    return {"count": len(written), "files": [str(p) for p in written]}


@mcp.resource("sheet://{character_id}/card", mime_type="text/html")
async def character_card(character_id: str) -> str:
    """Return a single character card as HTML."""
    book = await load_book()
    character = book.find(character_id)
    if character is None:
        raise ValueError(f"Unknown character: {character_id}")
    return render_card(character, config.IMAGE_DIR)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="sheetbook-mcp")
    parser.add_argument("--transport", choices=["stdio", "http", "sse"], default="stdio",
                        help="Transport to use: stdio (default), http (streamable HTTP), or sse")
    parser.add_argument("--host", default=None, help="Host to bind when using network transports")
    parser.add_argument("--port", type=int, default=None, help="Port to bind when using network transports")
    parser.add_argument("--data-dir", default=None,
                        help="Directory holding the roster and yaml/ catalogs (overrides SHEET_DATA_DIR env)")
    parser.add_argument("--image-dir", default=None,
                        help="Prefix for token images in rendered cards (overrides IMAGE_DIR env)")
    parser.add_argument("--render", default=None, metavar="PATH",
                        help="Write the static sheet page to PATH and exit instead of serving")
    ns = parser.parse_args(argv if argv is not None else sys.argv[1:])

    logging.basicConfig(level=config.LOG_LEVEL)

    # Apply runtime overrides; the catalog dir follows the data dir
    if ns.data_dir:
        config.DATA_DIR = Path(ns.data_dir)
        config.CATALOG_DIR = config.DATA_DIR / "yaml"
        LOG.info("Using data dir: %s", config.DATA_DIR)
    if ns.image_dir:
        config.IMAGE_DIR = ns.image_dir

    # First-run: fetch remote data if no roster present
    if not downloader.has_local_data() and config.DATA_BASE_URL and not config.DISABLE_AUTO_DOWNLOAD:
        LOG.info("No local roster found; fetching remote data...")
        try:
            downloader.fetch_all()
        except (OSError, requests.RequestException, ValueError) as ex:
            LOG.warning("Initial fetch failed: %s", ex)

    if ns.render:
        asyncio.run(write_page(Path(ns.render)))
        return

    transport = ns.transport
    if transport == "stdio":
        mcp.run()
        return

    host = ns.host or config.HOST
    port = ns.port or config.PORT
    mcp.run(transport=transport, host=host, port=port)


if __name__ == "__main__":
    main(sys.argv[1:])
