"""Tests for VariantPriceService."""

from decimal import Decimal

import pytest

from leazr.application.variant_service import VariantPriceService
from leazr.catalog.generator import GeneratorConfig, GenerationStatus
from leazr.domain.entities import Product
from leazr.domain.exceptions import (
    AttributeNotFoundError,
    DuplicateCombinationError,
    IncompleteCombinationError,
    InvalidAttributeError,
    InvalidBasePriceError,
    InvalidPriceError,
    ProductNotFoundError,
    ProductNotParentError,
    VariantPriceNotFoundError,
)
from leazr.domain.value_objects import AttributeSet


@pytest.fixture
def service(store) -> VariantPriceService:
    """Create service over the in-memory store."""
    return VariantPriceService(store, GeneratorConfig(seed=11))


class TestAttributes:
    """Tests for attribute management."""

    @pytest.mark.asyncio
    async def test_set_attributes_reads_back(
        self, service: VariantPriceService, laptop: Product
    ) -> None:
        """Stored attributes are returned after the update."""
        product = await service.set_attributes(laptop.id, {"RAM": "8 Go, 16 Go"})
        assert product.variation_attributes.to_dict() == {"RAM": ["8 Go", "16 Go"]}

    @pytest.mark.asyncio
    async def test_set_attributes_requires_one(
        self, service: VariantPriceService, laptop: Product
    ) -> None:
        """An empty mapping is rejected."""
        with pytest.raises(InvalidAttributeError, match="at least one attribute"):
            await service.set_attributes(laptop.id, {})

    @pytest.mark.asyncio
    async def test_set_attributes_unknown_product(self, service: VariantPriceService) -> None:
        """Unknown product is reported."""
        with pytest.raises(ProductNotFoundError):
            await service.set_attributes("missing", {"RAM": ["8 Go"]})

    @pytest.mark.asyncio
    async def test_add_attribute_requires_name(
        self, service: VariantPriceService, laptop: Product
    ) -> None:
        """A blank name is rejected."""
        with pytest.raises(InvalidAttributeError):
            await service.add_attribute(laptop.id, " ", "a, b")

    @pytest.mark.asyncio
    async def test_remove_attribute(
        self, service: VariantPriceService, laptop: Product
    ) -> None:
        """Removing an attribute keeps the others."""
        product = await service.remove_attribute(laptop.id, "Stockage")
        assert product.variation_attributes.names == ["Couleur"]
        with pytest.raises(AttributeNotFoundError):
            await service.remove_attribute(laptop.id, "Stockage")

    @pytest.mark.asyncio
    async def test_remove_attribute_strips_name(
        self, service: VariantPriceService, laptop: Product
    ) -> None:
        """Surrounding spaces in the name are ignored, as when adding."""
        await service.add_attribute(laptop.id, " Clavier ", "AZERTY")
        product = await service.remove_attribute(laptop.id, " Clavier")
        assert product.variation_attributes.names == ["Couleur", "Stockage"]

    @pytest.mark.asyncio
    async def test_add_attribute_merges_case_variants(
        self, service: VariantPriceService, laptop: Product
    ) -> None:
        """Values differing only by case are stored once."""
        product = await service.add_attribute(laptop.id, "Couleur", "Noir, noir, Blanc")
        assert product.variation_attributes.values_for("Couleur") == ("Noir", "Blanc")

    @pytest.mark.asyncio
    async def test_convert_to_parent(self, service: VariantPriceService, store) -> None:
        """Conversion marks the product as parent and zeroes its prices."""
        product = store.add_product(is_parent=False, price="499.00")
        converted = await service.convert_to_parent(product.id)
        assert converted.is_parent
        assert converted.price == Decimal("0")


class TestAddVariantPrice:
    """Tests for manual variant pricing."""

    @pytest.mark.asyncio
    async def test_add(self, service: VariantPriceService, laptop: Product) -> None:
        """Values are trimmed and prices rounded."""
        variant = await service.add_variant_price(
            laptop.id,
            {"Couleur": " Gris ", "Stockage": "256 Go"},
            price="999.999",
            purchase_price=700,
            monthly_price="",
            stock=0,
        )
        assert variant.attributes == {"Couleur": "Gris", "Stockage": "256 Go"}
        assert variant.price == Decimal("1000.00")
        assert variant.purchase_price == Decimal("700.00")
        assert variant.monthly_price is None
        assert variant.stock == 0

    @pytest.mark.asyncio
    async def test_not_parent(self, service: VariantPriceService, store) -> None:
        """Non-parent products cannot carry variant prices."""
        product = store.add_product(attributes={"a": ["1"]}, is_parent=False)
        with pytest.raises(ProductNotParentError):
            await service.add_variant_price(product.id, {"a": "1"}, 10, 5)

    @pytest.mark.asyncio
    async def test_product_without_attributes(
        self, service: VariantPriceService, store
    ) -> None:
        """Nothing can be priced on a parent without attributes."""
        product = store.add_product(attributes=None)
        with pytest.raises(IncompleteCombinationError):
            await service.add_variant_price(product.id, {}, 10, 5)

    @pytest.mark.asyncio
    async def test_unexpected_attribute(
        self, service: VariantPriceService, laptop: Product
    ) -> None:
        """Undeclared attributes are rejected."""
        with pytest.raises(IncompleteCombinationError) as exc_info:
            await service.add_variant_price(
                laptop.id,
                {"Couleur": "Gris", "Stockage": "256 Go", "Poids": "1 kg"},
                10,
                5,
            )
        assert exc_info.value.details["unexpected"] == ["Poids"]

    @pytest.mark.asyncio
    async def test_missing_purchase_price(
        self, service: VariantPriceService, laptop: Product
    ) -> None:
        """A purchase price is required."""
        with pytest.raises(InvalidPriceError) as exc_info:
            await service.add_variant_price(
                laptop.id, {"Couleur": "Gris", "Stockage": "256 Go"}, 10, None
            )
        assert exc_info.value.details["field"] == "purchase_price"

    @pytest.mark.asyncio
    async def test_negative_stock(
        self, service: VariantPriceService, laptop: Product
    ) -> None:
        """Stock must not be negative."""
        with pytest.raises(InvalidPriceError):
            await service.add_variant_price(
                laptop.id, {"Couleur": "Gris", "Stockage": "256 Go"}, 10, 5, stock=-2
            )

    @pytest.mark.asyncio
    async def test_duplicate(
        self, service: VariantPriceService, laptop: Product, store
    ) -> None:
        """A combination priced twice is rejected and not stored."""
        await service.add_variant_price(
            laptop.id, {"Couleur": "Gris", "Stockage": "256 Go"}, 10, 5
        )
        with pytest.raises(DuplicateCombinationError):
            await service.add_variant_price(
                laptop.id, {"Couleur": "gris", "Stockage": "256 GO"}, 12, 6
            )
        assert len(store.variant_prices) == 1


class TestUpdateDeleteFind:
    """Tests for update, delete and lookup."""

    @pytest.mark.asyncio
    async def test_update(self, service: VariantPriceService, laptop: Product) -> None:
        """Given fields are validated and applied."""
        variant = await service.add_variant_price(
            laptop.id, {"Couleur": "Gris", "Stockage": "256 Go"}, 10, 5
        )
        updated = await service.update_variant_price(
            variant.id, {"monthly_price": "3.5", "stock": 4}
        )
        assert updated.monthly_price == Decimal("3.50")
        assert updated.stock == 4
        assert updated.price == Decimal("10.00")

    @pytest.mark.asyncio
    async def test_update_unknown_field(
        self, service: VariantPriceService, laptop: Product
    ) -> None:
        """Attributes of a variant price cannot be changed."""
        variant = await service.add_variant_price(
            laptop.id, {"Couleur": "Gris", "Stockage": "256 Go"}, 10, 5
        )
        with pytest.raises(InvalidPriceError):
            await service.update_variant_price(variant.id, {"attributes": {}})

    @pytest.mark.asyncio
    async def test_update_nothing_returns_current(
        self, service: VariantPriceService, laptop: Product
    ) -> None:
        """An empty update returns the stored entry."""
        variant = await service.add_variant_price(
            laptop.id, {"Couleur": "Gris", "Stockage": "256 Go"}, 10, 5
        )
        assert await service.update_variant_price(variant.id, {}) == variant

    @pytest.mark.asyncio
    async def test_update_and_delete_unknown(self, service: VariantPriceService) -> None:
        """Unknown IDs are reported."""
        with pytest.raises(VariantPriceNotFoundError):
            await service.update_variant_price("missing", {"price": 10})
        with pytest.raises(VariantPriceNotFoundError):
            await service.delete_variant_price("missing")

    @pytest.mark.asyncio
    async def test_find_partial_selection(
        self, service: VariantPriceService, laptop: Product
    ) -> None:
        """A lookup with a subset of attributes returns the first match."""
        first = await service.add_variant_price(
            laptop.id, {"Couleur": "Gris", "Stockage": "256 Go"}, 10, 5
        )
        await service.add_variant_price(
            laptop.id, {"Couleur": "Gris", "Stockage": "512 Go"}, 20, 5
        )
        assert await service.find_variant_price(laptop.id, {"Couleur": "GRIS"}) == first
        assert await service.find_variant_price(laptop.id, {"Couleur": "Argent"}) is None


class TestGenerateVariantPrices:
    """Tests for bulk generation through the service."""

    @pytest.mark.asyncio
    async def test_generate(
        self, service: VariantPriceService, laptop: Product, store
    ) -> None:
        """Every combination is created once."""
        report = await service.generate_variant_prices(laptop.id, "100", "50", "20", 5)
        assert report.created_count == 4
        assert len(store.variant_prices) == 4
        for variant in store.variant_prices.values():
            assert Decimal("17.50") <= variant.monthly_price <= Decimal("22.50")
            assert variant.stock == 5

        again = await service.generate_variant_prices(laptop.id, "100", "50")
        assert again.status == GenerationStatus.NOTHING_TO_GENERATE
        assert len(store.variant_prices) == 4

    @pytest.mark.asyncio
    async def test_generate_validates_before_creating(
        self, service: VariantPriceService, laptop: Product, store
    ) -> None:
        """A non-numeric base price creates nothing."""
        with pytest.raises(InvalidBasePriceError):
            await service.generate_variant_prices(laptop.id, "100", "cheap")
        assert store.create_calls == []

    @pytest.mark.asyncio
    async def test_generate_not_parent(self, service: VariantPriceService, store) -> None:
        """Only parent products can be generated."""
        product = store.add_product(attributes={"a": ["1"]}, is_parent=False)
        with pytest.raises(ProductNotParentError):
            await service.generate_variant_prices(product.id, 100, 50)

    @pytest.mark.asyncio
    async def test_generate_no_attributes(self, service: VariantPriceService, store) -> None:
        """A product without attributes has nothing to generate."""
        product = store.add_product(attributes=None)
        report = await service.generate_variant_prices(product.id, 100, 50)
        assert report.nothing_to_generate
        assert report.total == 0

    @pytest.mark.asyncio
    async def test_generate_never_creates_case_duplicates(
        self, service: VariantPriceService, store
    ) -> None:
        """Bulk generation and manual pricing agree on what a duplicate is."""
        product = store.add_product(attributes=None)
        product.variation_attributes = AttributeSet(
            attributes=(("Couleur", ("Noir", "noir")),)
        )

        report = await service.generate_variant_prices(product.id, 100, 50)

        assert report.created_count == 1
        assert report.skipped == 1
        stored = await store.list_variant_prices(product.id)
        assert [v.attributes for v in stored] == [{"Couleur": "Noir"}]
        with pytest.raises(DuplicateCombinationError):
            await service.add_variant_price(product.id, {"Couleur": "noir"}, 10, 5)

    @pytest.mark.asyncio
    async def test_generate_progress(
        self, service: VariantPriceService, laptop: Product
    ) -> None:
        """Progress reaches the total."""
        seen: list[int] = []
        await service.generate_variant_prices(
            laptop.id, 100, 50, on_progress=lambda done, total: seen.append(done)
        )
        assert sorted(seen) == [1, 2, 3, 4]
