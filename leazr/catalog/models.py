"""SQLAlchemy models for the product catalog.

Defines Product and ProductVariantPrice tables for persistent storage.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from leazr.domain.entities import Product, VariantPrice
from leazr.domain.value_objects import AttributeSet
from leazr.infrastructure.database import Base


class ProductModel(Base):
    """Product in the leasing catalog.

    Attributes:
        id: Unique product identifier (UUID).
        name: Product name.
        brand: Brand name.
        category: Category slug.
        description: Product description.
        price: Sale price (0 once converted to a parent product).
        monthly_price: Monthly leasing price.
        is_parent: Whether prices are carried by variant combinations.
        variation_attributes: Attribute name -> allowed values.
        active: Whether product is listed.
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
    """

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    brand: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    monthly_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    is_parent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    variation_attributes: Mapped[dict[str, Any]] = mapped_column(
        JSONB, nullable=False, default=dict
    )
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    variant_prices: Mapped[list["ProductVariantPriceModel"]] = relationship(
        "ProductVariantPriceModel",
        back_populates="product",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<ProductModel(id={self.id}, name={self.name[:30]})>"

    def to_entity(self) -> Product:
        """Convert to domain entity.

        Returns:
            Product entity.
        """
        return Product(
            id=self.id,
            name=self.name,
            brand=self.brand,
            category=self.category,
            price=self.price,
            monthly_price=self.monthly_price,
            is_parent=self.is_parent,
            variation_attributes=AttributeSet.from_mapping(self.variation_attributes),
            active=self.active,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class ProductVariantPriceModel(Base):
    """Price of one attribute combination of a parent product.

    Attributes:
        id: Unique variant price identifier.
        product_id: Parent product ID.
        attributes: Attribute name -> selected value.
        price: Sale price.
        purchase_price: Purchase price.
        monthly_price: Monthly leasing price.
        stock: Available quantity.
    """

    __tablename__ = "product_variant_prices"

    id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    product_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    attributes: Mapped[dict[str, str]] = mapped_column(JSONB, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    purchase_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    monthly_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    stock: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    product: Mapped["ProductModel"] = relationship(
        "ProductModel", back_populates="variant_prices"
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<ProductVariantPriceModel(id={self.id}, attributes={self.attributes})>"

    def to_entity(self) -> VariantPrice:
        """Convert to domain entity.

        Returns:
            VariantPrice entity.
        """
        return VariantPrice(
            id=self.id,
            product_id=self.product_id,
            attributes=dict(self.attributes or {}),
            price=self.price,
            purchase_price=self.purchase_price,
            monthly_price=self.monthly_price,
            stock=self.stock,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )
