"""Variant price API endpoints.

Provides endpoints for listing, creating, looking up, updating and
deleting the priced combinations of parent products, and for bulk
generation of missing combinations.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from leazr.api.dependencies import get_service
from leazr.api.schemas import (
    ErrorResponse,
    GenerateVariantPricesRequest,
    GenerationReportResponse,
    VariantPriceCreateRequest,
    VariantPriceListResponse,
    VariantPriceLookupRequest,
    VariantPriceLookupResponse,
    VariantPriceResponse,
    VariantPriceUpdateRequest,
)
from leazr.application.variant_service import VariantPriceService

router = APIRouter(tags=["Variant Prices"])


# ============================================================================
# Product-scoped Endpoints
# ============================================================================


@router.get(
    "/products/{product_id}/variant-prices",
    response_model=VariantPriceListResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="List variant prices",
)
async def list_variant_prices(
    product_id: str,
    service: Annotated[VariantPriceService, Depends(get_service)],
) -> VariantPriceListResponse:
    """List the priced combinations of a product."""
    variant_prices = await service.list_variant_prices(product_id)
    return VariantPriceListResponse(
        product_id=product_id,
        items=[VariantPriceResponse.from_entity(v) for v in variant_prices],
        total=len(variant_prices),
    )


@router.post(
    "/products/{product_id}/variant-prices",
    response_model=VariantPriceResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
    summary="Price one combination",
)
async def create_variant_price(
    product_id: str,
    request: VariantPriceCreateRequest,
    service: Annotated[VariantPriceService, Depends(get_service)],
) -> VariantPriceResponse:
    """Price a single combination.

    Every attribute of the product must be given one of its allowed
    values. A combination that is already priced (ignoring case) is
    rejected with 409.
    """
    variant_price = await service.add_variant_price(
        product_id,
        attributes=request.attributes,
        price=request.price,
        purchase_price=request.purchase_price,
        monthly_price=request.monthly_price,
        stock=request.stock,
    )
    return VariantPriceResponse.from_entity(variant_price)


@router.post(
    "/products/{product_id}/variant-prices/lookup",
    response_model=VariantPriceLookupResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Find the price of a selected combination",
)
async def lookup_variant_price(
    product_id: str,
    request: VariantPriceLookupRequest,
    service: Annotated[VariantPriceService, Depends(get_service)],
) -> VariantPriceLookupResponse:
    """Find the variant price matching the selected attribute values."""
    variant_price = await service.find_variant_price(product_id, request.attributes)
    return VariantPriceLookupResponse(
        found=variant_price is not None,
        variant_price=(
            VariantPriceResponse.from_entity(variant_price) if variant_price else None
        ),
    )


@router.post(
    "/products/{product_id}/variant-prices/generate",
    response_model=GenerationReportResponse,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
    summary="Generate missing variant prices",
    description=(
        "Creates a price for every attribute combination that has none yet. "
        "Prices are spread around the base prices. Individual failures are "
        "reported and do not stop the batch."
    ),
)
async def generate_variant_prices(
    product_id: str,
    request: GenerateVariantPricesRequest,
    service: Annotated[VariantPriceService, Depends(get_service)],
) -> GenerationReportResponse:
    """Bulk-generate prices for missing combinations."""
    report = await service.generate_variant_prices(
        product_id,
        base_price=request.base_price,
        base_purchase_price=request.base_purchase_price,
        base_monthly_price=request.base_monthly_price,
        base_stock=request.base_stock,
    )
    return GenerationReportResponse.from_report(report)


# ============================================================================
# Variant Price Endpoints
# ============================================================================


@router.patch(
    "/variant-prices/{variant_price_id}",
    response_model=VariantPriceResponse,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
    summary="Update a variant price",
)
async def update_variant_price(
    variant_price_id: str,
    request: VariantPriceUpdateRequest,
    service: Annotated[VariantPriceService, Depends(get_service)],
) -> VariantPriceResponse:
    """Update prices or stock. Only fields present in the body change."""
    variant_price = await service.update_variant_price(
        variant_price_id,
        request.model_dump(exclude_unset=True),
    )
    return VariantPriceResponse.from_entity(variant_price)


@router.delete(
    "/variant-prices/{variant_price_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Delete a variant price",
)
async def delete_variant_price(
    variant_price_id: str,
    service: Annotated[VariantPriceService, Depends(get_service)],
) -> Response:
    """Delete a variant price."""
    await service.delete_variant_price(variant_price_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
