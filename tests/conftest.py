"""Shared fixtures: an in-memory catalog store standing in for the database."""

import asyncio
from dataclasses import replace
from decimal import Decimal
from typing import Any
from uuid import uuid4

import pytest

from leazr.domain.entities import Product, VariantPrice, VariantPriceDraft
from leazr.domain.exceptions import ProductNotFoundError, VariantPriceNotFoundError
from leazr.domain.value_objects import AttributeSet


class InMemoryCatalogStore:
    """CatalogStore keeping products and variant prices in dictionaries.

    Records every creation call, can fail selected calls (by call index)
    and tracks how many creations were in flight at once.
    """

    def __init__(self) -> None:
        self.products: dict[str, Product] = {}
        self.variant_prices: dict[str, VariantPrice] = {}
        self.create_calls: list[VariantPriceDraft] = []
        self.fail_on: set[int] = set()
        self.create_delay: float = 0.0
        self.in_flight = 0
        self.max_in_flight = 0

    def add_product(
        self,
        name: str = "MacBook Air 13",
        attributes: dict[str, list[str]] | None = None,
        is_parent: bool = True,
        price: str = "0.00",
    ) -> Product:
        """Insert a product directly."""
        product = Product(
            id=str(uuid4()),
            name=name,
            brand="Apple",
            category="laptop",
            price=Decimal(price),
            is_parent=is_parent,
            variation_attributes=AttributeSet.from_mapping(attributes),
        )
        self.products[product.id] = product
        return product

    async def get_product(self, product_id: str) -> Product | None:
        return self.products.get(product_id)

    async def save_variation_attributes(
        self, product_id: str, attributes: AttributeSet
    ) -> Product:
        product = self.products.get(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        product.variation_attributes = attributes
        return product

    async def convert_to_parent(self, product_id: str) -> Product:
        product = self.products.get(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        product.is_parent = True
        product.price = Decimal("0.00")
        product.monthly_price = Decimal("0.00")
        return product

    async def list_variant_prices(self, product_id: str) -> list[VariantPrice]:
        return [v for v in self.variant_prices.values() if v.product_id == product_id]

    async def get_variant_price(self, variant_price_id: str) -> VariantPrice | None:
        return self.variant_prices.get(variant_price_id)

    async def create_variant_price(self, draft: VariantPriceDraft) -> VariantPrice:
        index = len(self.create_calls)
        self.create_calls.append(draft)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.create_delay)
            if index in self.fail_on:
                raise RuntimeError(f"insert {index} rejected")
            variant_price = VariantPrice.from_draft(str(uuid4()), draft)
            self.variant_prices[variant_price.id] = variant_price
            return variant_price
        finally:
            self.in_flight -= 1

    async def update_variant_price(
        self, variant_price_id: str, updates: dict[str, Any]
    ) -> VariantPrice:
        current = self.variant_prices.get(variant_price_id)
        if current is None:
            raise VariantPriceNotFoundError(variant_price_id)
        updated = replace(current, **updates)
        self.variant_prices[variant_price_id] = updated
        return updated

    async def delete_variant_price(self, variant_price_id: str) -> bool:
        return self.variant_prices.pop(variant_price_id, None) is not None


@pytest.fixture
def store() -> InMemoryCatalogStore:
    """Create an empty in-memory store."""
    return InMemoryCatalogStore()


@pytest.fixture
def laptop(store: InMemoryCatalogStore) -> Product:
    """Parent product with two attributes (four combinations)."""
    return store.add_product(
        attributes={"Couleur": ["Gris", "Argent"], "Stockage": ["256 Go", "512 Go"]},
    )
