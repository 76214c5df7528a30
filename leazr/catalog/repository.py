"""Catalog repositories for database operations.

Provides CRUD operations for products and their variant prices.
"""

from collections.abc import Sequence
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from leazr.catalog.models import ProductModel, ProductVariantPriceModel
from leazr.domain.entities import VariantPriceDraft


class ProductRepository:
    """Repository for Product database operations.

    Example usage:
        async with async_session_factory() as session:
            repo = ProductRepository(session)
            product = await repo.get_by_id(product_id)
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def get_by_id(self, product_id: str) -> ProductModel | None:
        """Get product by ID.

        Args:
            product_id: Product ID.

        Returns:
            Product if found, None otherwise.
        """
        result = await self.session.execute(
            select(ProductModel).where(ProductModel.id == product_id)
        )
        return result.scalar_one_or_none()

    async def update_variation_attributes(
        self,
        product: ProductModel,
        attributes: dict[str, list[str]],
    ) -> ProductModel:
        """Replace the variation attributes of a product.

        Args:
            product: Product to update.
            attributes: New attribute mapping.

        Returns:
            Updated product.
        """
        product.variation_attributes = attributes
        product.updated_at = datetime.now(timezone.utc)
        await self.session.flush()
        return product

    async def clear_price(self, product: ProductModel) -> ProductModel:
        """Turn a product into a parent product without its own price.

        Args:
            product: Product to update.

        Returns:
            Updated product.
        """
        product.is_parent = True
        product.price = Decimal("0.00")
        product.monthly_price = Decimal("0.00")
        product.updated_at = datetime.now(timezone.utc)
        await self.session.flush()
        return product


class VariantPriceRepository:
    """Repository for ProductVariantPrice database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def create(self, draft: VariantPriceDraft) -> ProductVariantPriceModel:
        """Insert a variant price.

        Args:
            draft: Values of the new variant price.

        Returns:
            Persisted variant price.
        """
        variant_price = ProductVariantPriceModel(
            product_id=draft.product_id,
            attributes=dict(draft.attributes),
            price=draft.price,
            purchase_price=draft.purchase_price,
            monthly_price=draft.monthly_price,
            stock=draft.stock,
        )
        self.session.add(variant_price)
        await self.session.flush()
        return variant_price

    async def get_by_id(self, variant_price_id: str) -> ProductVariantPriceModel | None:
        """Get variant price by ID.

        Args:
            variant_price_id: Variant price ID.

        Returns:
            Variant price if found, None otherwise.
        """
        result = await self.session.execute(
            select(ProductVariantPriceModel).where(
                ProductVariantPriceModel.id == variant_price_id
            )
        )
        return result.scalar_one_or_none()

    async def find_by_product(self, product_id: str) -> Sequence[ProductVariantPriceModel]:
        """Get all variant prices of a product, oldest first.

        Args:
            product_id: Parent product ID.

        Returns:
            Sequence of variant prices.
        """
        result = await self.session.execute(
            select(ProductVariantPriceModel)
            .where(ProductVariantPriceModel.product_id == product_id)
            .order_by(ProductVariantPriceModel.created_at.asc())
        )
        return result.scalars().all()

    async def update(
        self,
        variant_price: ProductVariantPriceModel,
        updates: dict[str, Any],
    ) -> ProductVariantPriceModel:
        """Apply field updates to a variant price.

        Args:
            variant_price: Variant price to update.
            updates: Field name -> new value.

        Returns:
            Updated variant price.
        """
        for field_name, value in updates.items():
            setattr(variant_price, field_name, value)
        variant_price.updated_at = datetime.now(timezone.utc)
        await self.session.flush()
        return variant_price

    async def delete(self, variant_price_id: str) -> bool:
        """Delete a variant price.

        Args:
            variant_price_id: Variant price ID.

        Returns:
            True if a row was deleted.
        """
        result = await self.session.execute(
            delete(ProductVariantPriceModel).where(
                ProductVariantPriceModel.id == variant_price_id
            )
        )
        return result.rowcount > 0
