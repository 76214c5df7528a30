"""Domain layer - Entities, value objects and domain exceptions.

This module exports the core building blocks of the variant catalog:

- **Entities**: Objects with identity (Product, VariantPrice)
- **Value Objects**: Immutable objects compared by value (AttributeSet)
- **Exceptions**: Domain-specific errors and invariant violations

Example usage:
    from leazr.domain import AttributeSet

    attributes = AttributeSet.from_mapping(
        {"Couleur": ["Noir", "Blanc"], "Stockage": ["128 Go", "256 Go"]}
    )
    print(attributes.combination_count)  # 4
"""

# Base classes
from leazr.domain.base import Entity, ValueObject

# Entities
from leazr.domain.entities import Product, VariantPrice, VariantPriceDraft

# Exceptions
from leazr.domain.exceptions import (
    AttributeNotFoundError,
    DomainError,
    DuplicateCombinationError,
    IncompleteCombinationError,
    InvalidAttributeError,
    InvalidBasePriceError,
    InvalidPriceError,
    NotFoundError,
    ProductNotFoundError,
    ProductNotParentError,
    ValidationError,
    VariantPriceNotFoundError,
)

# Value Objects
from leazr.domain.value_objects import (
    AttributeSet,
    Combination,
    parse_attribute_values,
    to_positive_price,
    to_price,
    to_stock,
)

__all__ = [
    # Base
    "Entity",
    "ValueObject",
    # Entities
    "Product",
    "VariantPrice",
    "VariantPriceDraft",
    # Value Objects
    "AttributeSet",
    "Combination",
    "parse_attribute_values",
    "to_positive_price",
    "to_price",
    "to_stock",
    # Exceptions
    "AttributeNotFoundError",
    "DomainError",
    "DuplicateCombinationError",
    "IncompleteCombinationError",
    "InvalidAttributeError",
    "InvalidBasePriceError",
    "InvalidPriceError",
    "NotFoundError",
    "ProductNotFoundError",
    "ProductNotParentError",
    "ValidationError",
    "VariantPriceNotFoundError",
]
