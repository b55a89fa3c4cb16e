"""Downloader for the roster and catalog YAMLs from a remote mirror.

The mirror is any base URL laid out like the local data dir:
``<base>/ficha_personagens.yaml`` and ``<base>/yaml/<catalog>.yaml``.

This module exposes the same `fetch_all` function used by the CLI and the FastMCP tools.
"""
from pathlib import Path
import logging
import requests
from . import config
from .catalogs import CATALOG_SOURCES

LOG = logging.getLogger(__name__)


def _download(url: str, dest_path: Path) -> Path:
    resp = requests.get(url, timeout=config.HTTP_TIMEOUT)
    resp.raise_for_status()
    dest_path.parent.mkdir(parents=True, exist_ok=True)
    dest_path.write_bytes(resp.content)
    LOG.info("Downloaded %s -> %s", url, dest_path)
    return dest_path


def fetch_all(base_url: str | None = None, dest_dir: Path | None = None, roster_file: str | None = None) -> list[Path]:
    """Download the roster and every catalog into the local data dir.

    A missing roster is fatal; a missing catalog is logged and skipped,
    since the loader already copes with absent catalogs.

    This function is synchronous to make it easy to call from CLI, tests,
    and startup hooks.
    """
    base_url = (base_url or config.DATA_BASE_URL).rstrip("/")
    if not base_url:
        raise ValueError("no base URL configured (set DATA_BASE_URL)")
    dest_dir = dest_dir or config.DATA_DIR
    roster_file = roster_file or config.ROSTER_FILE

    LOG.info("Fetching roster from %s -> %s", base_url, dest_dir)
    written = [_download(f"{base_url}/{roster_file}", dest_dir / roster_file)]

    for filename, _top_key in CATALOG_SOURCES.values():
        try:
            written.append(_download(f"{base_url}/yaml/{filename}", dest_dir / "yaml" / filename))
        except requests.RequestException as ex:
            LOG.warning("Failed to download catalog %s: %s", filename, ex)
    return written


def has_local_data(data_dir: Path | None = None, roster_file: str | None = None) -> bool:
    data_dir = data_dir or config.DATA_DIR
    return (data_dir / (roster_file or config.ROSTER_FILE)).exists()


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser()
    parser.add_argument("--base-url", default=None)
    parser.add_argument("--dest-dir", default=None)
    args = parser.parse_args()
    fetch_all(args.base_url, Path(args.dest_dir) if args.dest_dir else None)
