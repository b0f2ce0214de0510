from __future__ import annotations

from pathlib import Path

from config import get_settings

MEDIA_ROOT = Path(get_settings().media_root)
PRODUCTS_MEDIA_DIR = "products"

REQUIRED_MEDIA_DIRS = [
    MEDIA_ROOT,
    MEDIA_ROOT / PRODUCTS_MEDIA_DIR,
]


def ensure_media_dirs() -> None:
    for directory in REQUIRED_MEDIA_DIRS:
        directory.mkdir(parents=True, exist_ok=True)
