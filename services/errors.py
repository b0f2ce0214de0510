"""Ошибки сервисного слоя каталога.

Сервисы бросают эти исключения, а webapi.py превращает их в JSON-ответы
вида ``{"detail": code}`` с соответствующим HTTP-статусом.
"""

from __future__ import annotations


class CatalogError(Exception):
    status_code = 500

    def __init__(self, code: str, message: str | None = None) -> None:
        super().__init__(message or code)
        self.code = code
        self.message = message or code


class NotFound(CatalogError):
    """Сущность с указанным id не существует."""

    status_code = 404


class Conflict(CatalogError):
    """Операция нарушила бы инвариант (цикл, дочерние узлы, последний суперадмин...)."""

    status_code = 409


class InvalidInput(CatalogError):
    status_code = 400


class StorageFailure(CatalogError):
    status_code = 500


class DataIntegrityError(StorageFailure):
    """Данные в базе уже повреждены (например, цикл в дереве категорий)."""


__all__ = [
    "CatalogError",
    "Conflict",
    "DataIntegrityError",
    "InvalidInput",
    "NotFound",
    "StorageFailure",
]
