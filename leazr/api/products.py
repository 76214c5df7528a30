"""Product attribute API endpoints.

Provides endpoints for managing the variation attributes of a product,
listing its combinations and converting it to a parent product.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from leazr.api.dependencies import get_service
from leazr.api.schemas import (
    AttributeAddRequest,
    AttributeSetResponse,
    AttributesUpdateRequest,
    CombinationListResponse,
    ErrorResponse,
    ProductResponse,
)
from leazr.application.variant_service import VariantPriceService

router = APIRouter(prefix="/products", tags=["Products"])

NOT_FOUND = {401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}
VALIDATION = {**NOT_FOUND, 422: {"model": ErrorResponse}}


@router.get(
    "/{product_id}/attributes",
    response_model=AttributeSetResponse,
    responses=NOT_FOUND,
    summary="Get variation attributes",
)
async def get_attributes(
    product_id: str,
    service: Annotated[VariantPriceService, Depends(get_service)],
) -> AttributeSetResponse:
    """Get the variation attributes of a product."""
    attributes = await service.get_attributes(product_id)
    return AttributeSetResponse(
        product_id=product_id,
        attributes=attributes.to_dict(),
        combination_count=attributes.combination_count,
    )


@router.put(
    "/{product_id}/attributes",
    response_model=ProductResponse,
    responses=VALIDATION,
    summary="Replace variation attributes",
)
async def set_attributes(
    product_id: str,
    request: AttributesUpdateRequest,
    service: Annotated[VariantPriceService, Depends(get_service)],
) -> ProductResponse:
    """Replace every variation attribute of a product.

    Values may be given as lists or as comma-separated strings; blanks
    and duplicates are dropped.
    """
    product = await service.set_attributes(product_id, request.attributes)
    return ProductResponse.from_entity(product)


@router.post(
    "/{product_id}/attributes",
    response_model=ProductResponse,
    responses=VALIDATION,
    summary="Add a variation attribute",
)
async def add_attribute(
    product_id: str,
    request: AttributeAddRequest,
    service: Annotated[VariantPriceService, Depends(get_service)],
) -> ProductResponse:
    """Add an attribute, or replace the values of an attribute of the same name."""
    product = await service.add_attribute(product_id, request.name, request.values)
    return ProductResponse.from_entity(product)


@router.delete(
    "/{product_id}/attributes/{name}",
    response_model=ProductResponse,
    responses=NOT_FOUND,
    summary="Remove a variation attribute",
)
async def remove_attribute(
    product_id: str,
    name: str,
    service: Annotated[VariantPriceService, Depends(get_service)],
) -> ProductResponse:
    """Remove an attribute from a product."""
    product = await service.remove_attribute(product_id, name)
    return ProductResponse.from_entity(product)


@router.get(
    "/{product_id}/combinations",
    response_model=CombinationListResponse,
    responses=NOT_FOUND,
    summary="List attribute combinations",
    description=(
        "Every combination of one value per attribute. The first attribute "
        "varies slowest, the last one fastest."
    ),
)
async def list_combinations(
    product_id: str,
    service: Annotated[VariantPriceService, Depends(get_service)],
) -> CombinationListResponse:
    """Enumerate the combinations of a product's attributes."""
    combinations = await service.list_combinations(product_id)
    return CombinationListResponse(
        product_id=product_id,
        items=combinations,
        total=len(combinations),
    )


@router.post(
    "/{product_id}/convert-to-parent",
    response_model=ProductResponse,
    responses=NOT_FOUND,
    summary="Convert to parent product",
)
async def convert_to_parent(
    product_id: str,
    service: Annotated[VariantPriceService, Depends(get_service)],
) -> ProductResponse:
    """Mark the product as parent and clear its own prices."""
    product = await service.convert_to_parent(product_id)
    return ProductResponse.from_entity(product)
