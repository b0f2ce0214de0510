"""Настройка логирования API каталога."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")
# SQL-запросы пишутся только при DEBUG.
QUIET_LOGGERS = ("sqlalchemy.engine", "multipart")


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _rotating_handler(path: Path, max_bytes: int, backups: int) -> RotatingFileHandler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backups, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def setup_logging(
    level: int | str = logging.INFO,
    *,
    log_file: Path | str | None = None,
    max_bytes: int = 5_000_000,
    backups: int = 3,
) -> None:
    """
    Консоль всегда, файл с ротацией если задан LOG_FILE.

    Логгеры uvicorn пишут в тот же файл, чтобы запросы и ошибки
    приложения оказались в одном месте.
    """
    numeric_level = _resolve_level(level)
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    file_handler = _rotating_handler(Path(log_file), max_bytes, backups) if log_file else None
    if file_handler is not None:
        handlers.append(file_handler)

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, handlers=handlers, force=True)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if numeric_level <= logging.DEBUG else logging.WARNING)

    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.setLevel(numeric_level)
        if file_handler is not None:
            server_logger.addHandler(file_handler)


__all__ = ["LOG_FORMAT", "setup_logging"]
