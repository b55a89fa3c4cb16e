"""Convenience CLI to fetch the roster and catalog YAMLs (wraps sheet_server.downloader)."""
from pathlib import Path
import argparse
import logging
from sheet_server import downloader


def main():
    p = argparse.ArgumentParser()
    p.add_argument("--base-url", default=None)
    p.add_argument("--dest-dir", default=None)
    p.add_argument("--roster-file", default=None)
    args = p.parse_args()
    logging.basicConfig(level=logging.INFO)
    downloader.fetch_all(args.base_url, Path(args.dest_dir) if args.dest_dir else None, args.roster_file)


if __name__ == "__main__":
    main()
