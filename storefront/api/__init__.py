# storefront/api/__init__.py
from fastapi import FastAPI

from storefront.api.routers import cart, favorites, health, orders


def include_routers(app: FastAPI) -> FastAPI:
    app.include_router(health.router)
    app.include_router(cart.router)
    app.include_router(favorites.router)
    app.include_router(orders.router)
    return app
