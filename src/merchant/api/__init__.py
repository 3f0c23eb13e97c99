"""Merchant domain API package."""

from merchant.api.routes import category_router, order_router, product_router

__all__ = ["product_router", "category_router", "order_router"]
