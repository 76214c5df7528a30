"""Variant price generator.

Materializes priced entries for the attribute combinations of a parent
product that have no price yet. Base prices are spread with small random
variations so variants do not all carry the same price, and creations are
submitted through a bounded-concurrency runner that tolerates individual
failures.
"""

import asyncio
import random
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any

import structlog

from leazr.catalog.combinations import split_missing
from leazr.domain.entities import VariantPrice, VariantPriceDraft
from leazr.domain.exceptions import DomainError, InvalidBasePriceError
from leazr.domain.value_objects import Combination, to_price, to_stock

logger = structlog.get_logger()


# ============================================================================
# Constants
# ============================================================================

# Spread applied around the base prices (uniform, in currency units)
PRICE_SPREAD = 25
PURCHASE_PRICE_SPREAD = 10

# The monthly price moves by a tenth of the sale price variation
MONTHLY_PRICE_RATIO = 10

# Lowest prices a generated variant may carry
MIN_PRICE = Decimal("10.00")
MIN_PURCHASE_PRICE = Decimal("5.00")
MIN_MONTHLY_PRICE = Decimal("1.00")


# ============================================================================
# Generator Configuration
# ============================================================================


@dataclass
class GeneratorConfig:
    """Configuration for variant price generation.

    Attributes:
        max_concurrency: Maximum creation requests in flight at once.
        progress_every: Log progress every N processed combinations.
        seed: Random seed for reproducible prices (None for system entropy).
    """

    max_concurrency: int = 4
    progress_every: int = 5
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        if self.progress_every < 1:
            raise ValueError("progress_every must be at least 1")

    @classmethod
    def sequential(cls, seed: int | None = None) -> "GeneratorConfig":
        """Create config issuing one creation at a time.

        Args:
            seed: Optional random seed.

        Returns:
            Config with a concurrency limit of one.
        """
        return cls(max_concurrency=1, seed=seed)

    @classmethod
    def from_settings(cls) -> "GeneratorConfig":
        """Create config from application settings."""
        from leazr.infrastructure.config import settings

        return cls(
            max_concurrency=settings.variant_generation_concurrency,
            progress_every=settings.variant_generation_progress_every,
        )


# ============================================================================
# Price Basis
# ============================================================================


def _parse_base_price(value: Any, field_name: str) -> Decimal:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidBasePriceError(field_name, value)
    try:
        return to_price(value, field_name)
    except DomainError:
        raise InvalidBasePriceError(field_name, value) from None


@dataclass(frozen=True)
class PriceBasis:
    """Base prices the generated variants are spread around.

    Attributes:
        price: Base sale price.
        purchase_price: Base purchase price.
        monthly_price: Optional base monthly price.
        stock: Optional stock given to every variant.
    """

    price: Decimal
    purchase_price: Decimal
    monthly_price: Decimal | None = None
    stock: int | None = None

    @classmethod
    def parse(
        cls,
        price: Any,
        purchase_price: Any,
        monthly_price: Any = None,
        stock: Any = None,
    ) -> "PriceBasis":
        """Validate raw base values.

        Args:
            price: Base sale price (number or numeric string).
            purchase_price: Base purchase price (number or numeric string).
            monthly_price: Optional base monthly price; blank means unset.
            stock: Optional stock quantity.

        Returns:
            Validated PriceBasis.

        Raises:
            InvalidBasePriceError: If a base price is missing or not numeric.
            InvalidPriceError: If the stock is not a non-negative integer.
        """
        base_price = _parse_base_price(price, "price")
        base_purchase_price = _parse_base_price(purchase_price, "purchase_price")

        base_monthly_price = None
        if monthly_price is not None and not (
            isinstance(monthly_price, str) and not monthly_price.strip()
        ):
            base_monthly_price = _parse_base_price(monthly_price, "monthly_price")

        return cls(
            price=base_price,
            purchase_price=base_purchase_price,
            monthly_price=base_monthly_price,
            stock=None if stock is None else to_stock(stock),
        )


def perturb_prices(
    basis: PriceBasis,
    rng: random.Random,
) -> tuple[Decimal, Decimal, Decimal | None]:
    """Spread base prices with a random variation.

    sale = max(10, price + U), U uniform in [-25, 25]
    purchase = max(5, purchase_price + V), V uniform in [-10, 10]
    monthly = max(1, monthly_price + U / 10) when a monthly price is set

    Args:
        basis: Base prices.
        rng: Random number generator.

    Returns:
        Tuple of (sale price, purchase price, monthly price or None).
    """
    price_variation = Decimal(str(rng.uniform(-PRICE_SPREAD, PRICE_SPREAD)))
    purchase_variation = Decimal(
        str(rng.uniform(-PURCHASE_PRICE_SPREAD, PURCHASE_PRICE_SPREAD))
    )

    price = max(MIN_PRICE, to_price(basis.price + price_variation))
    purchase_price = max(
        MIN_PURCHASE_PRICE,
        to_price(basis.purchase_price + purchase_variation),
    )

    monthly_price = None
    if basis.monthly_price is not None:
        monthly_price = max(
            MIN_MONTHLY_PRICE,
            to_price(basis.monthly_price + price_variation / MONTHLY_PRICE_RATIO),
        )

    return price, purchase_price, monthly_price


# ============================================================================
# Generation Report
# ============================================================================


class GenerationStatus(str, Enum):
    """Outcome of a bulk generation."""

    COMPLETED = "completed"
    NOTHING_TO_GENERATE = "nothing_to_generate"


@dataclass
class GenerationFailure:
    """A combination whose creation failed.

    Attributes:
        attributes: The combination.
        error: Error message returned by the creation call.
    """

    attributes: Combination
    error: str


@dataclass
class GenerationReport:
    """Summary of a bulk generation.

    Attributes:
        product_id: Owning product.
        total: Candidate combinations considered.
        skipped: Candidates that already had a price.
        created: Variant prices created, in candidate order.
        failures: Combinations whose creation failed, in candidate order.
        status: Overall outcome.
    """

    product_id: str
    total: int
    skipped: int = 0
    created: list[VariantPrice] = field(default_factory=list)
    failures: list[GenerationFailure] = field(default_factory=list)
    status: GenerationStatus = GenerationStatus.COMPLETED

    @property
    def created_count(self) -> int:
        """Number of variant prices created."""
        return len(self.created)

    @property
    def failed_count(self) -> int:
        """Number of failed creations."""
        return len(self.failures)

    @property
    def nothing_to_generate(self) -> bool:
        """Check if there was nothing to create."""
        return self.status == GenerationStatus.NOTHING_TO_GENERATE

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary.

        Returns:
            Dictionary representation.
        """
        return {
            "product_id": self.product_id,
            "status": self.status.value,
            "total": self.total,
            "skipped": self.skipped,
            "created": self.created_count,
            "failed": self.failed_count,
            "failures": [
                {"attributes": f.attributes, "error": f.error} for f in self.failures
            ],
        }


# ============================================================================
# Variant Price Generator
# ============================================================================


CreateVariantPrice = Callable[[VariantPriceDraft], Awaitable[VariantPrice]]
ProgressCallback = Callable[[int, int], None]


class VariantPriceGenerator:
    """Creates priced entries for missing attribute combinations.

    Example usage:
        generator = VariantPriceGenerator(GeneratorConfig(max_concurrency=4))
        report = await generator.generate_missing(
            product_id,
            existing=variant_prices,
            candidates=enumerate_combinations(attribute_set),
            base_price=100,
            base_purchase_price=50,
            create=store.create_variant_price,
        )
    """

    def __init__(
        self,
        config: GeneratorConfig | None = None,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize generator.

        Args:
            config: Generator configuration.
            rng: Random number generator; seeded from the config when omitted.
        """
        self.config = config or GeneratorConfig()
        self.rng = rng or random.Random(self.config.seed)

    def build_draft(
        self,
        product_id: str,
        combination: Combination,
        basis: PriceBasis,
    ) -> VariantPriceDraft:
        """Derive a priced draft for one combination.

        Args:
            product_id: Owning product.
            combination: Combination to price.
            basis: Base prices.

        Returns:
            Draft with spread prices.
        """
        price, purchase_price, monthly_price = perturb_prices(basis, self.rng)
        return VariantPriceDraft(
            product_id=product_id,
            attributes=dict(combination),
            price=price,
            purchase_price=purchase_price,
            monthly_price=monthly_price,
            stock=basis.stock,
        )

    async def generate_missing(
        self,
        product_id: str,
        existing: Iterable[VariantPrice],
        candidates: Sequence[Combination],
        base_price: Any,
        base_purchase_price: Any,
        base_monthly_price: Any = None,
        base_stock: Any = None,
        *,
        create: CreateVariantPrice,
        on_progress: ProgressCallback | None = None,
    ) -> GenerationReport:
        """Create variant prices for candidates that are not priced yet.

        Base prices are validated before anything else. Candidates already
        present in ``existing`` (case-insensitive) are skipped. A failed
        creation is recorded in the report and does not stop the others.

        Args:
            product_id: Owning product.
            existing: Variant prices already stored for the product.
            candidates: Combinations to consider.
            base_price: Base sale price.
            base_purchase_price: Base purchase price.
            base_monthly_price: Optional base monthly price.
            base_stock: Optional stock for every created variant.
            create: Coroutine persisting one draft.
            on_progress: Called with (done, total) after each creation.

        Returns:
            Generation report.

        Raises:
            InvalidBasePriceError: If a base price is missing or not numeric.
        """
        basis = PriceBasis.parse(
            base_price, base_purchase_price, base_monthly_price, base_stock
        )

        missing, present = split_missing(
            (variant.attributes for variant in existing),
            candidates,
        )
        report = GenerationReport(
            product_id=product_id,
            total=len(candidates),
            skipped=len(present),
        )

        if not missing:
            report.status = GenerationStatus.NOTHING_TO_GENERATE
            logger.info(
                "Nothing to generate",
                product_id=product_id,
                total=report.total,
                skipped=report.skipped,
            )
            return report

        # Drafts are priced up front so results do not depend on scheduling
        drafts = [self.build_draft(product_id, combo, basis) for combo in missing]

        logger.info(
            "Generating variant prices",
            product_id=product_id,
            count=len(drafts),
            skipped=report.skipped,
            max_concurrency=self.config.max_concurrency,
        )

        semaphore = asyncio.Semaphore(self.config.max_concurrency)
        done = 0

        async def submit(draft: VariantPriceDraft) -> VariantPrice | GenerationFailure:
            nonlocal done
            async with semaphore:
                try:
                    result: VariantPrice | GenerationFailure = await create(draft)
                except Exception as e:
                    logger.warning(
                        "Variant price creation failed",
                        product_id=product_id,
                        attributes=draft.attributes,
                        error=str(e),
                    )
                    result = GenerationFailure(
                        attributes=draft.attributes,
                        error=str(e) or type(e).__name__,
                    )

                done += 1
                if done % self.config.progress_every == 0 or done == len(drafts):
                    logger.info(
                        "Variant generation progress",
                        product_id=product_id,
                        done=done,
                        total=len(drafts),
                    )
                if on_progress is not None:
                    on_progress(done, len(drafts))
                return result

        results = await asyncio.gather(*(submit(draft) for draft in drafts))

        for result in results:
            if isinstance(result, GenerationFailure):
                report.failures.append(result)
            else:
                report.created.append(result)

        logger.info("Variant prices generated", **report.to_dict())
        return report
