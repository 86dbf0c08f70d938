"""Ordering domain API package."""

from ordering.api.routes import order_router, review_router

__all__ = ["order_router", "review_router"]
