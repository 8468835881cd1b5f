"""Repository for installed shops."""
from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models.shop import Shop


class ShopRepo:
    """Data-access helpers for :class:`Shop`."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, domain: str) -> Shop | None:
        return await self.session.get(Shop, domain)

    async def upsert(
        self, domain: str, access_token: str, scope: Optional[str] = None
    ) -> Shop:
        shop = await self.session.get(Shop, domain)
        if shop is None:
            shop = Shop(domain=domain, access_token=access_token, scope=scope)
        else:
            shop.access_token = access_token
            shop.scope = scope
        self.session.add(shop)
        await self.session.flush()
        return shop
