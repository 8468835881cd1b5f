"""Shared FastAPI dependencies."""
from __future__ import annotations

from typing import Any, AsyncGenerator, Dict

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.jwt import require_auth
from src.db.session import get_db
from src.repositories.shop_repo import ShopRepo
from src.services.limits import check_rate_limit
from src.services.shopify_admin import ShopifyAdminClient, exchange_session_token


async def get_db_session(
    session: AsyncSession = Depends(get_db),
) -> AsyncGenerator[AsyncSession, None]:
    yield session


async def get_shop(auth: Dict[str, Any] = Depends(require_auth)) -> str:
    """Authenticated shop domain, after the per-shop rate limit."""

    await check_rate_limit(auth["shop"])
    return auth["shop"]


async def get_admin_client(
    auth: Dict[str, Any] = Depends(require_auth),
    db: AsyncSession = Depends(get_db_session),
) -> ShopifyAdminClient:
    """Admin API client for the authenticated shop.

    The offline access token is obtained once by exchanging the session token
    and then reused from the ``shops`` table.
    """

    shop_domain = auth["shop"]
    repo = ShopRepo(db)
    shop = await repo.get(shop_domain)
    if shop is None or not shop.access_token:
        access_token, scope = await exchange_session_token(shop_domain, auth["token"])
        shop = await repo.upsert(shop_domain, access_token, scope)
    return ShopifyAdminClient(shop.domain, shop.access_token)
