"""Marketplace HTTP API package."""

from marketplace.api.errors import correlation_middleware, register_error_handlers
from marketplace.api.routes import (
    curator_router,
    inventory_router,
    order_router,
    payment_router,
    product_router,
)

__all__ = [
    "curator_router",
    "product_router",
    "inventory_router",
    "order_router",
    "payment_router",
    "correlation_middleware",
    "register_error_handlers",
]
