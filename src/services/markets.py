"""Shopify markets: remote reads and the local mirror."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models.market import Market
from src.repositories.market_repo import MarketRepo
from src.services.shopify_admin import ShopifyAdminClient

logger = logging.getLogger(__name__)

MARKETS_QUERY = """
query getMarkets {
  markets(first: 50) {
    edges { node { id name enabled } }
  }
}
"""

MARKET_QUERY = """
query getMarket($id: ID!) {
  market(id: $id) { id name enabled }
}
"""


def _market(node: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": node["id"],
        "name": node.get("name") or "",
        "enabled": bool(node.get("enabled")),
    }


async def fetch_markets(admin: ShopifyAdminClient) -> List[Dict[str, Any]]:
    data = await admin.graphql(MARKETS_QUERY)
    edges = (data.get("markets") or {}).get("edges", [])
    return [_market(edge["node"]) for edge in edges]


async def get_market(admin: ShopifyAdminClient, market_id: str) -> Optional[Dict[str, Any]]:
    data = await admin.graphql(MARKET_QUERY, {"id": market_id})
    market = data.get("market")
    return _market(market) if market else None


async def sync_markets(
    session: AsyncSession, admin: ShopifyAdminClient, shop: str
) -> List[Market]:
    """Mirror every Shopify market of the shop into the ``markets`` table."""

    repo = MarketRepo(session)
    synced = []
    for market in await fetch_markets(admin):
        synced.append(
            await repo.upsert(shop, market["id"], market["name"], market["enabled"])
        )
    logger.info(f"Synced {len(synced)} markets for {shop}")
    return synced


async def get_markets(session: AsyncSession, shop: str) -> List[Market]:
    return await MarketRepo(session).list_enabled(shop)
