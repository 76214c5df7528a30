"""Domain exceptions.

All domain-level errors that represent business rule violations.
These exceptions are raised by entities, the combination generator and
application services when invariants are violated or invalid operations
are attempted.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(DomainError):
    """Base class for lookups that found nothing."""

    pass


class ValidationError(DomainError):
    """Base class for rejected input."""

    pass


# ============================================================================
# Product Errors
# ============================================================================


class ProductNotFoundError(NotFoundError):
    """Raised when a product does not exist."""

    def __init__(self, product_id: str) -> None:
        """Initialize product not found error.

        Args:
            product_id: ID of the missing product.
        """
        super().__init__(
            f"Product {product_id} not found",
            details={"product_id": product_id},
        )


class ProductNotParentError(ValidationError):
    """Raised when variant prices are attached to a product without variants."""

    def __init__(self, product_id: str) -> None:
        """Initialize product not parent error.

        Args:
            product_id: ID of the product.
        """
        super().__init__(
            f"Product {product_id} is not a parent product",
            details={"product_id": product_id},
        )


# ============================================================================
# Attribute Errors
# ============================================================================


class InvalidAttributeError(ValidationError):
    """Raised when an attribute name or its values are unusable."""

    def __init__(self, reason: str, attribute: str | None = None) -> None:
        """Initialize invalid attribute error.

        Args:
            reason: Explanation of what is wrong.
            attribute: Attribute name, if known.
        """
        super().__init__(
            reason,
            details={"attribute": attribute, "reason": reason},
        )


class AttributeNotFoundError(NotFoundError):
    """Raised when removing an attribute the product does not declare."""

    def __init__(self, product_id: str, attribute: str) -> None:
        """Initialize attribute not found error.

        Args:
            product_id: ID of the product.
            attribute: Name of the missing attribute.
        """
        super().__init__(
            f"Attribute '{attribute}' not found on product {product_id}",
            details={"product_id": product_id, "attribute": attribute},
        )


class IncompleteCombinationError(ValidationError):
    """Raised when a combination does not pick one allowed value per attribute."""

    def __init__(
        self,
        missing: list[str],
        unexpected: list[str],
        invalid: dict[str, str] | None = None,
    ) -> None:
        """Initialize incomplete combination error.

        Args:
            missing: Attributes without a selected value.
            unexpected: Keys that are not declared attributes.
            invalid: Attributes whose value is not allowed.
        """
        invalid = invalid or {}
        super().__init__(
            "All attribute options must be selected",
            details={
                "missing": missing,
                "unexpected": unexpected,
                "invalid": invalid,
            },
        )


# ============================================================================
# Variant Price Errors
# ============================================================================


class DuplicateCombinationError(ValidationError):
    """Raised when a priced combination already exists for the product."""

    def __init__(self, product_id: str, attributes: dict[str, str]) -> None:
        """Initialize duplicate combination error.

        Args:
            product_id: ID of the owning product.
            attributes: The conflicting combination.
        """
        super().__init__(
            "This attribute combination already exists",
            details={"product_id": product_id, "attributes": attributes},
        )


class VariantPriceNotFoundError(NotFoundError):
    """Raised when a variant price does not exist."""

    def __init__(self, variant_price_id: str) -> None:
        """Initialize variant price not found error.

        Args:
            variant_price_id: ID of the missing variant price.
        """
        super().__init__(
            f"Variant price {variant_price_id} not found",
            details={"variant_price_id": variant_price_id},
        )


class InvalidPriceError(ValidationError):
    """Raised when a price or stock value is out of range."""

    def __init__(self, field: str, value: Any, reason: str) -> None:
        """Initialize invalid price error.

        Args:
            field: Name of the offending field.
            value: The rejected value.
            reason: Explanation of why the value is invalid.
        """
        super().__init__(
            f"Invalid {field} {value!r}: {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class InvalidBasePriceError(ValidationError):
    """Raised when bulk generation is started without usable base prices."""

    def __init__(self, field: str, value: Any) -> None:
        """Initialize invalid base price error.

        Args:
            field: Name of the missing or non-numeric base price.
            value: The rejected value.
        """
        super().__init__(
            "A base price and a base purchase price are required",
            details={"field": field, "value": None if value is None else str(value)},
        )
