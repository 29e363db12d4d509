"""Storefront domain API package."""

from storefront.api.routes import (
    admin_router,
    auth_router,
    cart_router,
    customer_router,
    order_router,
    product_router,
)

__all__ = [
    "admin_router",
    "auth_router",
    "cart_router",
    "customer_router",
    "order_router",
    "product_router",
]
