"""Endpoints for Shopify markets."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.deps import get_admin_client, get_db_session, get_shop
from src.schemas.market import MarketRead
from src.services import markets as markets_service
from src.services.shopify_admin import ShopifyAdminClient


router = APIRouter(prefix="/markets", tags=["markets"])


@router.get("")
async def list_markets(
    shop: str = Depends(get_shop), db: AsyncSession = Depends(get_db_session)
):
    markets = await markets_service.get_markets(db, shop)
    return {"markets": [MarketRead.model_validate(m) for m in markets]}


@router.post("/sync")
async def sync_markets(
    shop: str = Depends(get_shop),
    admin: ShopifyAdminClient = Depends(get_admin_client),
    db: AsyncSession = Depends(get_db_session),
):
    markets = await markets_service.sync_markets(db, admin, shop)
    return {"synced": len(markets), "markets": [MarketRead.model_validate(m) for m in markets]}
