"""
Фото товаров.

У товара не больше одного главного фото, а если фото есть, то ровно одно.
Первое принятое фото в пустом товаре становится главным, при удалении
главного фото главным становится оставшееся с наименьшим sort_order.
"""

from __future__ import annotations

import logging
import mimetypes
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable
from uuid import uuid4

from sqlalchemy import case, func, select, update
from sqlalchemy.orm import Session

from config import get_settings
from media_paths import PRODUCTS_MEDIA_DIR
from models import ProductImage
from services.errors import InvalidInput, NotFound
from services.media import MediaStorage, get_storage
from services.products import get_product, serialize_image

logger = logging.getLogger(__name__)

MAX_IMAGE_SIZE_BYTES = get_settings().max_upload_mb * 1024 * 1024


@dataclass
class UploadedImage:
    original_name: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


def _content_type(upload: UploadedImage) -> str:
    return (upload.content_type or "").split(";")[0].strip().lower()


def is_acceptable(upload: UploadedImage) -> bool:
    return _content_type(upload).startswith("image/") and upload.size <= MAX_IMAGE_SIZE_BYTES


def _build_filename(product_id: int, upload: UploadedImage) -> str:
    extension = Path(upload.original_name or "").suffix.lower()
    if not extension:
        extension = mimetypes.guess_extension(_content_type(upload)) or ""
    return f"{product_id}-{int(time.time() * 1000)}-{uuid4().hex[:12]}{extension}"


def get_image(db: Session, image_id: int) -> ProductImage:
    image = db.get(ProductImage, image_id)
    if not image:
        raise NotFound("image_not_found", "Image not found")
    return image


def list_images(db: Session, product_id: int) -> list[dict[str, Any]]:
    get_product(db, product_id)
    images = (
        db.execute(
            select(ProductImage)
            .where(ProductImage.product_id == product_id)
            .order_by(ProductImage.is_main.desc(), ProductImage.sort_order, ProductImage.id)
        )
        .scalars()
        .all()
    )
    return [serialize_image(image) for image in images]


def upload_images(
    db: Session,
    product_id: int,
    uploads: Iterable[UploadedImage],
    storage: MediaStorage | None = None,
) -> list[dict[str, Any]]:
    storage = storage or get_storage()
    get_product(db, product_id)

    # Состояние до загрузки фиксируется один раз на всю пачку.
    existing_count = int(
        db.scalar(select(func.count(ProductImage.id)).where(ProductImage.product_id == product_id))
        or 0
    )
    max_sort = db.scalar(
        select(func.max(ProductImage.sort_order)).where(ProductImage.product_id == product_id)
    )
    next_sort = 0 if max_sort is None else int(max_sort) + 1
    assign_main = existing_count == 0

    created: list[ProductImage] = []
    stored_paths: list[str] = []
    try:
        for upload in uploads:
            if not is_acceptable(upload):
                logger.info(
                    "Skipping upload %s for product %s (type=%s, size=%s)",
                    upload.original_name,
                    product_id,
                    upload.content_type,
                    upload.size,
                )
                continue

            filename = _build_filename(product_id, upload)
            path = storage.store(upload.data, filename, PRODUCTS_MEDIA_DIR)
            stored_paths.append(path)

            image = ProductImage(
                product_id=product_id,
                filename=filename,
                original_name=upload.original_name or filename,
                path=path,
                size=upload.size,
                mime_type=_content_type(upload),
                is_main=assign_main and not created,
                sort_order=next_sort,
            )
            next_sort += 1
            db.add(image)
            created.append(image)

        if not created:
            raise InvalidInput("no_valid_images", "No valid images were uploaded")

        db.commit()
    except Exception:
        db.rollback()
        for path in stored_paths:
            storage.delete(path)
        raise

    logger.info("Uploaded %s images for product %s", len(created), product_id)
    return [serialize_image(image, storage) for image in created]


def set_main_image(db: Session, image_id: int) -> dict[str, Any]:
    image = get_image(db, image_id)

    # Одно UPDATE-выражение: снять флаг со всех фото товара и поставить выбранному.
    db.execute(
        update(ProductImage)
        .where(ProductImage.product_id == image.product_id)
        .values(is_main=case((ProductImage.id == image.id, True), else_=False))
        .execution_options(synchronize_session="fetch")
    )
    db.commit()
    db.refresh(image)
    logger.info("Image %s is now main for product %s", image.id, image.product_id)
    return serialize_image(image)


def delete_image(db: Session, image_id: int, storage: MediaStorage | None = None) -> dict[str, str]:
    storage = storage or get_storage()
    image = get_image(db, image_id)
    product_id = image.product_id
    path = image.path

    if image.is_main:
        successor = (
            db.execute(
                select(ProductImage)
                .where(ProductImage.product_id == product_id, ProductImage.id != image.id)
                .order_by(ProductImage.sort_order, ProductImage.id)
                .limit(1)
            )
            .scalars()
            .first()
        )
        if successor is not None:
            successor.is_main = True
            logger.info("Image %s promoted to main for product %s", successor.id, product_id)

    db.delete(image)
    db.commit()
    logger.info("Image %s of product %s deleted", image_id, product_id)

    # Запись уже удалена; файл, который не удалось стереть, только логируем.
    if not storage.delete(path):
        logger.warning("Failed to delete physical file %s of image %s", path, image_id)
    return {"status": "ok"}


__all__ = [
    "MAX_IMAGE_SIZE_BYTES",
    "UploadedImage",
    "delete_image",
    "get_image",
    "is_acceptable",
    "list_images",
    "set_main_image",
    "upload_images",
]
