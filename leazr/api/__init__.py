"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from leazr.api.health import router as health_router
from leazr.api.products import router as products_router
from leazr.api.variant_prices import router as variant_prices_router

__all__ = [
    "health_router",
    "products_router",
    "variant_prices_router",
]
