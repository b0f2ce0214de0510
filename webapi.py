"""
Backend каталога (FastAPI).
Приложение: webapi:app
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import IntegrityError

from admin_panel import ADMIN_ROUTERS
from config import get_settings
from database import init_db
from media_paths import MEDIA_ROOT, ensure_media_dirs
from routes_public import router as public_router
from services.errors import CatalogError
from services.media import MEDIA_URL_PREFIX
from utils.logging_config import setup_logging

APP_TITLE = "Catalog Admin API"
APP_VERSION = "1.0.0"

logger = logging.getLogger(__name__)


async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.code, "message": exc.message},
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    # Проигранная гонка за уникальный slug/email доходит сюда от базы.
    logger.warning("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(status_code=409, content={"detail": "unique_violation"})


async def json_exception_handler(request: Request, exc: Exception) -> JSONResponse:  # noqa: WPS430
    logger.exception("Unhandled application error", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


def create_app() -> FastAPI:
    app = FastAPI(title=APP_TITLE, version=APP_VERSION)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(CatalogError, catalog_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, json_exception_handler)

    for router in ADMIN_ROUTERS:
        app.include_router(router)

    app.mount(MEDIA_URL_PREFIX, StaticFiles(directory=str(MEDIA_ROOT), check_dir=False), name="media")

    @app.get("/")
    def healthcheck() -> dict[str, bool]:
        return {"ok": True}

    # Витрина последней: маршрут /{slug} перехватывает одиночные пути.
    app.include_router(public_router)

    @app.on_event("startup")
    def _startup() -> None:
        settings = get_settings()
        setup_logging(settings.log_level, log_file=settings.log_file)
        ensure_media_dirs()
        init_db()
        logger.info("%s %s started", APP_TITLE, APP_VERSION)

    return app


app = create_app()


__all__ = ["app", "create_app"]
