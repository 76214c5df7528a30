"""Variant pricing application service.

Handles variation attributes of parent products, manual and bulk creation
of priced combinations, and lookup of the price of a selected combination.
"""

import random
from collections.abc import Mapping, Sequence
from typing import Any

import structlog

from leazr.catalog.combinations import (
    enumerate_combinations,
    find_match,
    is_complete,
    validate_combination,
)
from leazr.catalog.generator import (
    GenerationReport,
    GeneratorConfig,
    ProgressCallback,
    VariantPriceGenerator,
)
from leazr.catalog.store import CatalogStore, get_catalog_store
from leazr.domain.entities import Product, VariantPrice, VariantPriceDraft
from leazr.domain.exceptions import (
    AttributeNotFoundError,
    DuplicateCombinationError,
    IncompleteCombinationError,
    InvalidAttributeError,
    InvalidPriceError,
    ProductNotFoundError,
    ProductNotParentError,
    VariantPriceNotFoundError,
)
from leazr.domain.value_objects import (
    AttributeSet,
    Combination,
    parse_attribute_values,
    to_positive_price,
    to_stock,
)

logger = structlog.get_logger()

UPDATABLE_FIELDS = ("price", "purchase_price", "monthly_price", "stock")


class VariantPriceService:
    """Service for variation attributes and variant prices.

    Example usage:
        service = VariantPriceService(get_catalog_store())
        await service.add_attribute(product_id, "Couleur", "Noir, Blanc")
        report = await service.generate_variant_prices(
            product_id, base_price="899", base_purchase_price="650"
        )
    """

    def __init__(
        self,
        store: CatalogStore,
        generator_config: GeneratorConfig | None = None,
        rng: random.Random | None = None,
        request_id: str | None = None,
    ) -> None:
        """Initialize service.

        Args:
            store: Catalog persistence.
            generator_config: Bulk generation configuration.
            rng: Random number generator used to spread generated prices.
            request_id: Optional request ID for log correlation.
        """
        self.store = store
        self.generator = VariantPriceGenerator(generator_config, rng=rng)
        self.request_id = request_id

    async def _get_product(self, product_id: str) -> Product:
        product = await self.store.get_product(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    async def _get_parent_product(self, product_id: str) -> Product:
        product = await self._get_product(product_id)
        if not product.is_parent:
            raise ProductNotParentError(product_id)
        return product

    # ------------------------------------------------------------------
    # Variation attributes
    # ------------------------------------------------------------------

    async def get_attributes(self, product_id: str) -> AttributeSet:
        """Get the variation attributes of a product.

        Raises:
            ProductNotFoundError: If the product does not exist.
        """
        product = await self._get_product(product_id)
        return product.variation_attributes

    async def set_attributes(
        self,
        product_id: str,
        attributes: Mapping[str, Sequence[str] | str],
    ) -> Product:
        """Replace all variation attributes of a product.

        The stored attributes are read back to confirm the update.

        Args:
            product_id: Product ID.
            attributes: Attribute name -> values (list or comma-separated).

        Returns:
            Updated product.

        Raises:
            InvalidAttributeError: If no attribute is given or one has no value.
            ProductNotFoundError: If the product does not exist.
        """
        if not attributes:
            raise InvalidAttributeError("Add at least one attribute")
        attribute_set = AttributeSet.from_mapping(attributes)

        await self._get_product(product_id)
        await self.store.save_variation_attributes(product_id, attribute_set)

        saved = await self._get_product(product_id)
        logger.info(
            "Variation attributes updated",
            product_id=product_id,
            attributes=saved.variation_attributes.names,
            combinations=saved.variation_attributes.combination_count,
            request_id=self.request_id,
        )
        return saved

    async def add_attribute(
        self,
        product_id: str,
        name: str,
        values: Sequence[str] | str,
    ) -> Product:
        """Add an attribute, or replace the values of an existing one.

        Args:
            product_id: Product ID.
            name: Attribute name.
            values: Values, as a list or a comma-separated string.

        Returns:
            Updated product.

        Raises:
            InvalidAttributeError: If the name is blank or no value remains.
            ProductNotFoundError: If the product does not exist.
        """
        if not name or not name.strip():
            raise InvalidAttributeError("Attribute name is required")
        parsed = parse_attribute_values(values)
        if not parsed:
            raise InvalidAttributeError("Enter at least one attribute value", name.strip())

        product = await self._get_product(product_id)
        attribute_set = product.variation_attributes.with_attribute(name, parsed)
        await self.store.save_variation_attributes(product_id, attribute_set)
        return await self._get_product(product_id)

    async def remove_attribute(self, product_id: str, name: str) -> Product:
        """Remove an attribute from a product.

        Raises:
            AttributeNotFoundError: If the product does not declare the attribute.
            ProductNotFoundError: If the product does not exist.
        """
        name = name.strip()
        product = await self._get_product(product_id)
        if name not in product.variation_attributes:
            raise AttributeNotFoundError(product_id, name)
        attribute_set = product.variation_attributes.without_attribute(name)
        await self.store.save_variation_attributes(product_id, attribute_set)
        return await self._get_product(product_id)

    async def list_combinations(self, product_id: str) -> list[Combination]:
        """Enumerate every combination of the product's attributes.

        Raises:
            ProductNotFoundError: If the product does not exist.
        """
        product = await self._get_product(product_id)
        return enumerate_combinations(product.variation_attributes)

    async def convert_to_parent(self, product_id: str) -> Product:
        """Turn a product into a parent product whose prices live on variants.

        Raises:
            ProductNotFoundError: If the product does not exist.
        """
        await self._get_product(product_id)
        product = await self.store.convert_to_parent(product_id)
        logger.info(
            "Product converted to parent",
            product_id=product_id,
            request_id=self.request_id,
        )
        return product

    # ------------------------------------------------------------------
    # Variant prices
    # ------------------------------------------------------------------

    async def list_variant_prices(self, product_id: str) -> list[VariantPrice]:
        """List the priced combinations of a product.

        Raises:
            ProductNotFoundError: If the product does not exist.
        """
        await self._get_product(product_id)
        return await self.store.list_variant_prices(product_id)

    async def add_variant_price(
        self,
        product_id: str,
        attributes: Mapping[str, str],
        price: Any,
        purchase_price: Any,
        monthly_price: Any = None,
        stock: int | None = None,
    ) -> VariantPrice:
        """Price a single combination entered by hand.

        Args:
            product_id: Parent product ID.
            attributes: One selected value per attribute.
            price: Sale price.
            purchase_price: Purchase price.
            monthly_price: Optional monthly price.
            stock: Optional stock quantity.

        Returns:
            Created variant price.

        Raises:
            ProductNotFoundError: If the product does not exist.
            ProductNotParentError: If the product is not a parent product.
            IncompleteCombinationError: If an attribute has no allowed value selected.
            InvalidPriceError: If a price or the stock is invalid.
            DuplicateCombinationError: If the combination is already priced.
        """
        product = await self._get_parent_product(product_id)

        combination = {key: str(value).strip() for key, value in attributes.items()}
        if not is_complete(combination, product.variation_attributes):
            missing, unexpected, invalid = validate_combination(
                combination, product.variation_attributes
            )
            raise IncompleteCombinationError(missing, unexpected, invalid)

        if price is None or str(price).strip() == "":
            raise InvalidPriceError("price", price, "a price is required")
        if purchase_price is None or str(purchase_price).strip() == "":
            raise InvalidPriceError("purchase_price", purchase_price, "a purchase price is required")

        draft = VariantPriceDraft(
            product_id=product_id,
            attributes=combination,
            price=to_positive_price(price, "price"),
            purchase_price=to_positive_price(purchase_price, "purchase_price"),
            monthly_price=(
                None
                if monthly_price is None or str(monthly_price).strip() == ""
                else to_positive_price(monthly_price, "monthly_price")
            ),
            stock=None if stock is None else to_stock(stock),
        )

        existing = await self.store.list_variant_prices(product_id)
        if find_match((v.attributes for v in existing), combination) is not None:
            raise DuplicateCombinationError(product_id, combination)

        variant_price = await self.store.create_variant_price(draft)
        logger.info(
            "Variant price added",
            product_id=product_id,
            variant_price_id=variant_price.id,
            attributes=combination,
            request_id=self.request_id,
        )
        return variant_price

    async def update_variant_price(
        self,
        variant_price_id: str,
        updates: Mapping[str, Any],
    ) -> VariantPrice:
        """Update prices or stock of a variant price.

        Args:
            variant_price_id: Variant price ID.
            updates: Any of price, purchase_price, monthly_price, stock.

        Returns:
            Updated variant price.

        Raises:
            VariantPriceNotFoundError: If the variant price does not exist.
            InvalidPriceError: If a value is invalid.
        """
        unknown = [key for key in updates if key not in UPDATABLE_FIELDS]
        if unknown:
            raise InvalidPriceError(unknown[0], updates[unknown[0]], "field cannot be updated")

        clean: dict[str, Any] = {}
        for field_name, value in updates.items():
            if field_name == "stock":
                clean[field_name] = None if value is None else to_stock(value)
            elif field_name == "monthly_price" and value is None:
                clean[field_name] = None
            else:
                clean[field_name] = to_positive_price(value, field_name)

        current = await self.store.get_variant_price(variant_price_id)
        if current is None:
            raise VariantPriceNotFoundError(variant_price_id)
        if not clean:
            return current

        variant_price = await self.store.update_variant_price(variant_price_id, clean)
        logger.info(
            "Variant price updated",
            variant_price_id=variant_price_id,
            fields=sorted(clean),
            request_id=self.request_id,
        )
        return variant_price

    async def delete_variant_price(self, variant_price_id: str) -> None:
        """Delete a variant price.

        Raises:
            VariantPriceNotFoundError: If the variant price does not exist.
        """
        deleted = await self.store.delete_variant_price(variant_price_id)
        if not deleted:
            raise VariantPriceNotFoundError(variant_price_id)
        logger.info(
            "Variant price deleted",
            variant_price_id=variant_price_id,
            request_id=self.request_id,
        )

    async def find_variant_price(
        self,
        product_id: str,
        attributes: Mapping[str, str],
    ) -> VariantPrice | None:
        """Find the stored price of a selected combination.

        Returns the first variant price carrying every selected attribute
        with an equal value, ignoring case.

        Raises:
            ProductNotFoundError: If the product does not exist.
        """
        for variant_price in await self.list_variant_prices(product_id):
            if find_match([variant_price.attributes], attributes) is not None:
                return variant_price
        return None

    async def generate_variant_prices(
        self,
        product_id: str,
        base_price: Any,
        base_purchase_price: Any,
        base_monthly_price: Any = None,
        base_stock: Any = None,
        on_progress: ProgressCallback | None = None,
    ) -> GenerationReport:
        """Create a price for every combination that has none yet.

        Args:
            product_id: Parent product ID.
            base_price: Base sale price.
            base_purchase_price: Base purchase price.
            base_monthly_price: Optional base monthly price.
            base_stock: Optional stock for every created variant.
            on_progress: Called with (done, total) after each creation.

        Returns:
            Generation report.

        Raises:
            ProductNotFoundError: If the product does not exist.
            ProductNotParentError: If the product is not a parent product.
            InvalidBasePriceError: If a base price is missing or not numeric.
        """
        product = await self._get_parent_product(product_id)
        candidates = enumerate_combinations(product.variation_attributes)
        existing = await self.store.list_variant_prices(product_id)

        logger.info(
            "Bulk variant generation requested",
            product_id=product_id,
            candidates=len(candidates),
            existing=len(existing),
            request_id=self.request_id,
        )

        return await self.generator.generate_missing(
            product_id,
            existing,
            candidates,
            base_price,
            base_purchase_price,
            base_monthly_price,
            base_stock,
            create=self.store.create_variant_price,
            on_progress=on_progress,
        )


def get_variant_service(request_id: str | None = None) -> VariantPriceService:
    """Create a variant service backed by the database.

    Args:
        request_id: Optional request ID for correlation.

    Returns:
        VariantPriceService instance.
    """
    return VariantPriceService(
        get_catalog_store(),
        generator_config=GeneratorConfig.from_settings(),
        request_id=request_id,
    )
