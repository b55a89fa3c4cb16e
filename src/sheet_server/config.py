from pathlib import Path
import os
from dotenv import load_dotenv

# Load .env (if present) so env-based configuration works in dev
load_dotenv()

# Local data layout: roster at the root, catalogs under yaml/
DATA_DIR = Path(os.getenv("SHEET_DATA_DIR", "./data"))
ROSTER_FILE = os.getenv("ROSTER_FILE", "ficha_personagens.yaml")
CATALOG_DIR = Path(os.getenv("CATALOG_DIR", str(DATA_DIR / "yaml")))

# Prefix used for token images in rendered cards
IMAGE_DIR = os.getenv("IMAGE_DIR", "img")

# Remote mirror of the data files (empty disables fetching)
DATA_BASE_URL = os.getenv("DATA_BASE_URL", "")

# HTTP / runtime
PORT = int(os.getenv("PORT", "3334"))
HOST = os.getenv("HOST", "127.0.0.1")
HTTP_TIMEOUT = int(os.getenv("HTTP_TIMEOUT", "30"))

# Behavior
DISABLE_AUTO_DOWNLOAD = os.getenv("DISABLE_AUTO_DOWNLOAD", "0") in ("1", "true", "True")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
