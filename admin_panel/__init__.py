"""JSON-API админки каталога: категории, товары, страницы, админы."""

from admin_panel.routes import auth, categories, pages, products, users

ADMIN_ROUTERS = (
    auth.router,
    categories.router,
    products.router,
    pages.router,
    users.router,
)

__all__ = ["ADMIN_ROUTERS"]
