"""Файловое хранилище загруженных изображений."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from media_paths import MEDIA_ROOT
from services.errors import StorageFailure

logger = logging.getLogger(__name__)

MEDIA_URL_PREFIX = "/media"


class MediaStorage:
    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def _resolve(self, relative_path: str) -> Path | None:
        root = self.root.resolve()
        target = (root / relative_path.lstrip("/")).resolve()
        if target != root and root not in target.parents:
            return None
        return target

    def store(self, data: bytes, filename: str, folder: str) -> str:
        target_dir = self.root / folder
        full_path = target_dir / filename
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            full_path.write_bytes(data)
        except OSError as exc:
            logger.exception("Failed to write upload %s", full_path)
            raise StorageFailure("file_write_failed", "Failed to save file") from exc

        logger.info("Saved upload to %s (size=%s)", full_path, len(data))
        return f"{folder}/{filename}"

    def delete(self, relative_path: str) -> bool:
        """Удаляет файл; ошибки не пробрасываются, а возвращаются как False."""

        target = self._resolve(relative_path)
        if target is None:
            logger.warning("Refusing to delete %s: outside of media root", relative_path)
            return False
        if not target.exists():
            return True
        try:
            target.unlink()
        except OSError:
            logger.warning("Failed to delete media file %s", target, exc_info=True)
            return False
        return True

    def url_for(self, relative_path: str) -> str:
        return f"{MEDIA_URL_PREFIX}/{relative_path.lstrip('/')}"


@lru_cache(maxsize=1)
def get_storage() -> MediaStorage:
    return MediaStorage(MEDIA_ROOT)


__all__ = ["MEDIA_URL_PREFIX", "MediaStorage", "get_storage"]
