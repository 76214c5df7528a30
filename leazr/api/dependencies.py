"""Shared FastAPI dependencies."""

from fastapi import Request

from leazr.application.variant_service import VariantPriceService, get_variant_service


def get_service(request: Request) -> VariantPriceService:
    """Get variant service with request ID."""
    request_id = getattr(request.state, "request_id", None)
    return get_variant_service(request_id=request_id)
