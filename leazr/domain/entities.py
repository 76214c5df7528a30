"""Domain entities for the variant pricing catalog.

Entities have identity and lifecycle. A Product owns its variation
attributes and, when it is a parent product, a set of VariantPrice
entries, one per attribute combination.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal

from leazr.domain.base import Entity
from leazr.domain.value_objects import AttributeSet, Combination


@dataclass(eq=False)
class Product(Entity[str]):
    """A catalog item that can be leased.

    Attributes:
        id: Product identifier.
        name: Display name.
        brand: Brand name.
        category: Category slug.
        price: Sale price (0 for parent products).
        monthly_price: Monthly leasing price (0 for parent products).
        is_parent: Whether prices live on variant combinations.
        variation_attributes: Declared variation attributes.
        active: Whether the product is visible in the catalog.
    """

    name: str
    brand: str | None = None
    category: str | None = None
    price: Decimal = Decimal("0.00")
    monthly_price: Decimal | None = None
    is_parent: bool = False
    variation_attributes: AttributeSet = field(default_factory=AttributeSet)
    active: bool = True
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class VariantPriceDraft:
    """A priced combination that has not been persisted yet.

    Attributes:
        product_id: Owning product.
        attributes: The combination.
        price: Sale price.
        purchase_price: Purchase price.
        monthly_price: Optional monthly price.
        stock: Optional stock quantity.
    """

    product_id: str
    attributes: Combination
    price: Decimal
    purchase_price: Decimal
    monthly_price: Decimal | None = None
    stock: int | None = None


@dataclass(eq=False)
class VariantPrice(Entity[str]):
    """A persisted priced combination of a parent product."""

    product_id: str
    attributes: Combination
    price: Decimal
    purchase_price: Decimal
    monthly_price: Decimal | None = None
    stock: int | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_draft(cls, variant_price_id: str, draft: VariantPriceDraft) -> "VariantPrice":
        """Create an entity from a draft once it has an identifier.

        Args:
            variant_price_id: Assigned identifier.
            draft: Draft to materialize.

        Returns:
            VariantPrice instance.
        """
        return cls(
            id=variant_price_id,
            product_id=draft.product_id,
            attributes=dict(draft.attributes),
            price=draft.price,
            purchase_price=draft.purchase_price,
            monthly_price=draft.monthly_price,
            stock=draft.stock,
        )
