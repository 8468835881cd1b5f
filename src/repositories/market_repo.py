"""Repository for mirrored Shopify markets."""
from __future__ import annotations

from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models.market import Market


class MarketRepo:
    """Data-access helpers for :class:`Market`."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def upsert(self, shop: str, shopify_id: str, name: str, enabled: bool) -> Market:
        result = await self.session.execute(
            select(Market).where(Market.shop == shop, Market.shopify_id == shopify_id)
        )
        market = result.scalar_one_or_none()
        if market is None:
            market = Market(shop=shop, shopify_id=shopify_id, name=name, enabled=enabled)
        else:
            market.name = name
            market.enabled = enabled
        self.session.add(market)
        await self.session.flush()
        return market

    async def list_enabled(self, shop: str) -> List[Market]:
        result = await self.session.execute(
            select(Market)
            .where(Market.shop == shop, Market.enabled.is_(True))
            .order_by(Market.name.asc())
        )
        return list(result.scalars().all())
