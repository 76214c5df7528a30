"""API schemas for the Leazr variant pricing API.

Pydantic models for request/response validation and serialization.
"""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from leazr.catalog.generator import GenerationReport
from leazr.domain.entities import Product, VariantPrice


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] | dict = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


# ============================================================================
# Product & Attribute Schemas
# ============================================================================


class ProductResponse(BaseModel):
    """Product with its variation attributes."""

    id: str
    name: str
    brand: str | None = None
    category: str | None = None
    price: Decimal
    monthly_price: Decimal | None = None
    is_parent: bool
    variation_attributes: dict[str, list[str]]
    combination_count: int

    @classmethod
    def from_entity(cls, product: Product) -> "ProductResponse":
        """Convert Product entity to response schema."""
        return cls(
            id=product.id,
            name=product.name,
            brand=product.brand,
            category=product.category,
            price=product.price,
            monthly_price=product.monthly_price,
            is_parent=product.is_parent,
            variation_attributes=product.variation_attributes.to_dict(),
            combination_count=product.variation_attributes.combination_count,
        )


class AttributeSetResponse(BaseModel):
    """Variation attributes of a product."""

    product_id: str
    attributes: dict[str, list[str]]
    combination_count: int


class AttributesUpdateRequest(BaseModel):
    """Request replacing all variation attributes."""

    attributes: dict[str, list[str] | str] = Field(
        ...,
        description="Attribute name -> values (list or comma-separated string)",
        examples=[{"Couleur": ["Noir", "Blanc"], "Stockage": "128 Go, 256 Go"}],
    )


class AttributeAddRequest(BaseModel):
    """Request adding one attribute."""

    name: str = Field(..., description="Attribute name", examples=["Couleur"])
    values: list[str] | str = Field(
        ...,
        description="Values as a list or a comma-separated string",
        examples=["Noir, Blanc, Argent"],
    )


class CombinationListResponse(BaseModel):
    """Every combination of a product's attributes, in enumeration order."""

    product_id: str
    items: list[dict[str, str]]
    total: int


# ============================================================================
# Variant Price Schemas
# ============================================================================


class VariantPriceCreateRequest(BaseModel):
    """Request to price one combination."""

    attributes: dict[str, str] = Field(..., description="One value per attribute")
    price: Decimal | None = Field(default=None, description="Sale price")
    purchase_price: Decimal | None = Field(default=None, description="Purchase price")
    monthly_price: Decimal | None = Field(default=None, description="Monthly price")
    stock: int | None = Field(default=None, ge=0, description="Stock quantity")


class VariantPriceUpdateRequest(BaseModel):
    """Request to update a variant price. Only provided fields change."""

    price: Decimal | None = None
    purchase_price: Decimal | None = None
    monthly_price: Decimal | None = None
    stock: int | None = Field(default=None, ge=0)


class VariantPriceResponse(BaseModel):
    """A priced combination."""

    id: str
    product_id: str
    attributes: dict[str, str]
    price: Decimal
    purchase_price: Decimal
    monthly_price: Decimal | None = None
    stock: int | None = None
    created_at: datetime

    @classmethod
    def from_entity(cls, variant_price: VariantPrice) -> "VariantPriceResponse":
        """Convert VariantPrice entity to response schema."""
        return cls(
            id=variant_price.id,
            product_id=variant_price.product_id,
            attributes=dict(variant_price.attributes),
            price=variant_price.price,
            purchase_price=variant_price.purchase_price,
            monthly_price=variant_price.monthly_price,
            stock=variant_price.stock,
            created_at=variant_price.created_at,
        )


class VariantPriceListResponse(BaseModel):
    """Variant prices of a product."""

    product_id: str
    items: list[VariantPriceResponse]
    total: int


class VariantPriceLookupRequest(BaseModel):
    """Selected attribute values to look up."""

    attributes: dict[str, str]


class VariantPriceLookupResponse(BaseModel):
    """Result of a variant price lookup."""

    found: bool
    variant_price: VariantPriceResponse | None = None


# ============================================================================
# Bulk Generation Schemas
# ============================================================================


class GenerateVariantPricesRequest(BaseModel):
    """Request to price every combination that has no price yet."""

    base_price: Decimal | None = Field(default=None, description="Base sale price")
    base_purchase_price: Decimal | None = Field(
        default=None, description="Base purchase price"
    )
    base_monthly_price: Decimal | None = Field(
        default=None, description="Base monthly price"
    )
    base_stock: int | None = Field(default=None, ge=0, description="Stock of each variant")


class GenerationFailureSchema(BaseModel):
    """A combination whose creation failed."""

    attributes: dict[str, str]
    error: str


class GenerationReportResponse(BaseModel):
    """Summary of a bulk generation."""

    product_id: str
    status: str = Field(..., description="completed or nothing_to_generate")
    total: int = Field(..., description="Combinations considered")
    skipped: int = Field(..., description="Combinations already priced")
    created: int
    failed: int
    items: list[VariantPriceResponse]
    failures: list[GenerationFailureSchema]

    @classmethod
    def from_report(cls, report: GenerationReport) -> "GenerationReportResponse":
        """Convert GenerationReport to response schema."""
        return cls(
            product_id=report.product_id,
            status=report.status.value,
            total=report.total,
            skipped=report.skipped,
            created=report.created_count,
            failed=report.failed_count,
            items=[VariantPriceResponse.from_entity(v) for v in report.created],
            failures=[
                GenerationFailureSchema(attributes=f.attributes, error=f.error)
                for f in report.failures
            ],
        )
