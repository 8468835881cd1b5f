"""Endpoints listing translatable Shopify content."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from src.api.deps import get_admin_client, get_shop
from src.core.exceptions import ValidationException
from src.services.shopify_admin import ShopifyAdminClient
from src.services.shopify_content import RESOURCE_TYPES, fetch_resources


router = APIRouter(prefix="/content", tags=["content"])


@router.get("/{resource_type}")
async def list_resources(
    resource_type: str,
    limit: int = Query(default=50, ge=1, le=250),
    shop: str = Depends(get_shop),
    admin: ShopifyAdminClient = Depends(get_admin_client),
):
    if resource_type not in RESOURCE_TYPES:
        raise ValidationException(f"Unsupported resource type: {resource_type}")
    return {"resources": await fetch_resources(admin, resource_type, limit)}
