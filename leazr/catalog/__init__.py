"""Variant catalog.

Provides attribute combination enumeration, variant price generation and
persistence for parent products and their priced combinations.
"""

from leazr.catalog.combinations import (
    combination_key,
    combination_label,
    combination_matches,
    enumerate_combinations,
    find_match,
    is_complete,
    split_missing,
    validate_combination,
)
from leazr.catalog.generator import (
    GenerationFailure,
    GenerationReport,
    GenerationStatus,
    GeneratorConfig,
    PriceBasis,
    VariantPriceGenerator,
    perturb_prices,
)
from leazr.catalog.models import ProductModel, ProductVariantPriceModel
from leazr.catalog.repository import ProductRepository, VariantPriceRepository
from leazr.catalog.store import CatalogStore, SqlAlchemyCatalogStore, get_catalog_store

__all__ = [
    # Combinations
    "combination_key",
    "combination_label",
    "combination_matches",
    "enumerate_combinations",
    "find_match",
    "is_complete",
    "split_missing",
    "validate_combination",
    # Generator
    "GenerationFailure",
    "GenerationReport",
    "GenerationStatus",
    "GeneratorConfig",
    "PriceBasis",
    "VariantPriceGenerator",
    "perturb_prices",
    # Models
    "ProductModel",
    "ProductVariantPriceModel",
    # Repositories
    "ProductRepository",
    "VariantPriceRepository",
    # Store
    "CatalogStore",
    "SqlAlchemyCatalogStore",
    "get_catalog_store",
]
