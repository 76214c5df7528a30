"""Catalog store.

The application layer depends on the CatalogStore protocol. The SQLAlchemy
implementation opens one session per operation, so concurrent variant
creations never share a session.
"""

from typing import Any, Protocol
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from leazr.catalog.repository import ProductRepository, VariantPriceRepository
from leazr.domain.entities import Product, VariantPrice, VariantPriceDraft
from leazr.domain.exceptions import ProductNotFoundError, VariantPriceNotFoundError
from leazr.domain.value_objects import AttributeSet


def is_valid_id(value: str) -> bool:
    """Check that an identifier is a UUID, the type of every catalog key."""
    try:
        UUID(str(value))
    except ValueError:
        return False
    return True


class CatalogStore(Protocol):
    """Persistence operations used by the variant pricing service."""

    async def get_product(self, product_id: str) -> Product | None: ...

    async def save_variation_attributes(
        self, product_id: str, attributes: AttributeSet
    ) -> Product: ...

    async def convert_to_parent(self, product_id: str) -> Product: ...

    async def list_variant_prices(self, product_id: str) -> list[VariantPrice]: ...

    async def get_variant_price(self, variant_price_id: str) -> VariantPrice | None: ...

    async def create_variant_price(self, draft: VariantPriceDraft) -> VariantPrice: ...

    async def update_variant_price(
        self, variant_price_id: str, updates: dict[str, Any]
    ) -> VariantPrice: ...

    async def delete_variant_price(self, variant_price_id: str) -> bool: ...


class SqlAlchemyCatalogStore:
    """CatalogStore backed by the relational database.

    Example usage:
        store = SqlAlchemyCatalogStore(async_session_factory)
        product = await store.get_product(product_id)
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize store.

        Args:
            session_factory: Factory creating one session per operation.
        """
        self.session_factory = session_factory

    async def get_product(self, product_id: str) -> Product | None:
        """Get product by ID."""
        if not is_valid_id(product_id):
            return None
        async with self.session_factory() as session:
            product = await ProductRepository(session).get_by_id(product_id)
            return product.to_entity() if product else None

    async def save_variation_attributes(
        self, product_id: str, attributes: AttributeSet
    ) -> Product:
        """Replace the variation attributes of a product.

        Raises:
            ProductNotFoundError: If the product does not exist.
        """
        if not is_valid_id(product_id):
            raise ProductNotFoundError(product_id)
        async with self.session_factory() as session:
            repo = ProductRepository(session)
            product = await repo.get_by_id(product_id)
            if product is None:
                raise ProductNotFoundError(product_id)
            await repo.update_variation_attributes(product, attributes.to_dict())
            await session.commit()
            return product.to_entity()

    async def convert_to_parent(self, product_id: str) -> Product:
        """Mark a product as parent and clear its own prices.

        Raises:
            ProductNotFoundError: If the product does not exist.
        """
        if not is_valid_id(product_id):
            raise ProductNotFoundError(product_id)
        async with self.session_factory() as session:
            repo = ProductRepository(session)
            product = await repo.get_by_id(product_id)
            if product is None:
                raise ProductNotFoundError(product_id)
            await repo.clear_price(product)
            await session.commit()
            return product.to_entity()

    async def list_variant_prices(self, product_id: str) -> list[VariantPrice]:
        """List variant prices of a product."""
        if not is_valid_id(product_id):
            return []
        async with self.session_factory() as session:
            rows = await VariantPriceRepository(session).find_by_product(product_id)
            return [row.to_entity() for row in rows]

    async def get_variant_price(self, variant_price_id: str) -> VariantPrice | None:
        """Get variant price by ID."""
        if not is_valid_id(variant_price_id):
            return None
        async with self.session_factory() as session:
            row = await VariantPriceRepository(session).get_by_id(variant_price_id)
            return row.to_entity() if row else None

    async def create_variant_price(self, draft: VariantPriceDraft) -> VariantPrice:
        """Insert a variant price in its own transaction."""
        async with self.session_factory() as session:
            try:
                row = await VariantPriceRepository(session).create(draft)
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            return row.to_entity()

    async def update_variant_price(
        self, variant_price_id: str, updates: dict[str, Any]
    ) -> VariantPrice:
        """Update fields of a variant price.

        Raises:
            VariantPriceNotFoundError: If the variant price does not exist.
        """
        if not is_valid_id(variant_price_id):
            raise VariantPriceNotFoundError(variant_price_id)
        async with self.session_factory() as session:
            repo = VariantPriceRepository(session)
            row = await repo.get_by_id(variant_price_id)
            if row is None:
                raise VariantPriceNotFoundError(variant_price_id)
            await repo.update(row, updates)
            await session.commit()
            return row.to_entity()

    async def delete_variant_price(self, variant_price_id: str) -> bool:
        """Delete a variant price."""
        if not is_valid_id(variant_price_id):
            return False
        async with self.session_factory() as session:
            deleted = await VariantPriceRepository(session).delete(variant_price_id)
            await session.commit()
            return deleted


# Global store instance
_catalog_store: SqlAlchemyCatalogStore | None = None


def get_catalog_store() -> SqlAlchemyCatalogStore:
    """Get the database-backed store singleton.

    Returns:
        SqlAlchemyCatalogStore instance.
    """
    global _catalog_store
    if _catalog_store is None:
        from leazr.infrastructure.database import async_session_factory

        _catalog_store = SqlAlchemyCatalogStore(async_session_factory)
    return _catalog_store
