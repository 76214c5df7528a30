"""Application layer module.

Contains application services (use cases) that orchestrate
domain logic and infrastructure.
"""

from leazr.application.variant_service import (
    VariantPriceService,
    get_variant_service,
)

__all__ = [
    "VariantPriceService",
    "get_variant_service",
]
