#!/usr/bin/env python3
"""Generate missing variant prices for a parent product.

Prices every attribute combination of the product that has no price yet,
spreading prices around the given base prices.

Usage:
    python scripts/generate_variants.py --product-id <uuid> --price 899 --purchase-price 650
    python scripts/generate_variants.py --product-id <uuid> --price 899 \\
        --purchase-price 650 --monthly-price 39.90 --stock 10 --concurrency 1
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from leazr.application.variant_service import VariantPriceService
from leazr.catalog.combinations import combination_label
from leazr.catalog.generator import GenerationReport, GeneratorConfig
from leazr.catalog.store import SqlAlchemyCatalogStore
from leazr.domain.exceptions import DomainError
from leazr.infrastructure.config import settings
from leazr.infrastructure.database import Base, async_session_factory, engine
from leazr.infrastructure.logging_config import configure_logging


async def create_tables() -> None:
    """Create database tables if they don't exist."""
    # Registers the catalog tables on Base.metadata
    import leazr.catalog.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


def print_progress(done: int, total: int) -> None:
    """Print a progress line every five combinations and at the end."""
    if done % 5 == 0 or done == total:
        print(f"  ... {done}/{total}")


def print_report(report: GenerationReport) -> None:
    """Print a generation report."""
    if report.nothing_to_generate:
        print("Nothing to generate: every combination already has a price.")
        print(f"  Combinations: {report.total}, already priced: {report.skipped}")
        return

    print(f"  ✓ Created: {report.created_count}")
    print(f"  ✓ Already priced: {report.skipped}")
    if report.failures:
        print(f"  ✗ Failed: {report.failed_count}")
        for failure in report.failures:
            print(f"      {combination_label(failure.attributes)} -> {failure.error}")


async def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Generate missing variant prices for a parent product",
    )
    parser.add_argument("--product-id", required=True, help="Parent product ID")
    parser.add_argument("--price", required=True, help="Base sale price")
    parser.add_argument("--purchase-price", required=True, help="Base purchase price")
    parser.add_argument("--monthly-price", default=None, help="Base monthly price")
    parser.add_argument("--stock", type=int, default=None, help="Stock of each variant")
    parser.add_argument(
        "--concurrency",
        type=int,
        default=settings.variant_generation_concurrency,
        help="Maximum creations in flight (1 = one at a time)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed for prices")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create database tables before generating",
    )

    args = parser.parse_args()
    configure_logging("WARNING")

    print("=" * 60)
    print("Leazr Variant Price Generator")
    print("=" * 60)
    print(f"Product: {args.product_id}")
    print(f"Concurrency: {args.concurrency}")
    print()

    if args.create_tables:
        print("Creating database tables...")
        await create_tables()
        print("Tables ready.")
        print()

    service = VariantPriceService(
        SqlAlchemyCatalogStore(async_session_factory),
        generator_config=GeneratorConfig(max_concurrency=args.concurrency, seed=args.seed),
    )

    try:
        report = await service.generate_variant_prices(
            args.product_id,
            base_price=args.price,
            base_purchase_price=args.purchase_price,
            base_monthly_price=args.monthly_price,
            base_stock=args.stock,
            on_progress=print_progress,
        )
    except DomainError as e:
        print(f"  ✗ Error: {e.message}")
        return 1
    finally:
        await engine.dispose()

    print_report(report)
    print("=" * 60)
    return 1 if report.failures else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
