"""Товары и их фото в админке."""

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy.orm import Session

from admin_panel.dependencies import get_current_admin, get_db_session
from schemas.catalog import ProductPayload, ProductUpdatePayload
from services import product_images as images_service
from services import products as products_service

router = APIRouter(
    prefix="/api/admin/products",
    tags=["AdminProducts"],
    dependencies=[Depends(get_current_admin)],
)


@router.get("")
def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(products_service.DEFAULT_PAGE_SIZE, ge=1, le=products_service.MAX_PAGE_SIZE),
    category_id: int | None = Query(None, alias="categoryId"),
    search: str | None = None,
    is_active: bool | None = Query(None, alias="isActive"),
    db: Session = Depends(get_db_session),
):
    return products_service.list_products(
        db,
        page=page,
        limit=limit,
        category_id=category_id,
        search=search,
        is_active=is_active,
    )


@router.get("/{product_id}")
def get_product(product_id: int, db: Session = Depends(get_db_session)):
    return products_service.get_product_detail(db, product_id)


@router.post("", status_code=201)
def create_product(payload: ProductPayload, db: Session = Depends(get_db_session)):
    return products_service.create_product(db, payload)


@router.put("/{product_id}")
def update_product(
    product_id: int,
    payload: ProductUpdatePayload,
    db: Session = Depends(get_db_session),
):
    return products_service.update_product(db, product_id, payload)


@router.delete("/{product_id}")
def delete_product(product_id: int, db: Session = Depends(get_db_session)):
    return products_service.delete_product(db, product_id)


@router.get("/{product_id}/images")
def list_product_images(product_id: int, db: Session = Depends(get_db_session)):
    return {"items": images_service.list_images(db, product_id)}


@router.post("/{product_id}/images", status_code=201)
async def upload_product_images(
    product_id: int,
    images: list[UploadFile] = File(...),
    db: Session = Depends(get_db_session),
):
    if not images:
        raise HTTPException(status_code=400, detail="no_files")

    uploads = [
        images_service.UploadedImage(
            original_name=upload.filename or "",
            content_type=upload.content_type or "",
            data=await upload.read(),
        )
        for upload in images
    ]
    items = images_service.upload_images(db, product_id, uploads)
    return {"message": f"{len(items)} images uploaded successfully", "items": items}


@router.put("/images/{image_id}/main")
def set_main_image(image_id: int, db: Session = Depends(get_db_session)):
    return images_service.set_main_image(db, image_id)


@router.delete("/images/{image_id}")
def delete_product_image(image_id: int, db: Session = Depends(get_db_session)):
    return images_service.delete_image(db, image_id)
